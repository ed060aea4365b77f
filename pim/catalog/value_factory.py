"""Product value factories.

Each factory builds the typed values of the attribute types it
supports. The ChainedValueFactory dispatches a creation request to the
first registered factory supporting the attribute's type.

Channel and locale codes must have been checked against the
attribute's scopable/localizable flags by the caller; factories only
check that the data fits the attribute type.

Example usage:
    factory = default_value_factory()
    value = factory.create(name_attribute, None, "en_US", "Running shoe")
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from pim.domain.entities import (
    Attribute,
    DateValue,
    MetricValue,
    OptionsValue,
    OptionValue,
    PriceCollectionValue,
    ScalarValue,
    Value,
)
from pim.domain.exceptions import InvalidValueDataError, UnsupportedAttributeTypeError
from pim.domain.value_objects import AttributeType, Metric, Price

logger = structlog.get_logger()


# ============================================================================
# Factory Interface
# ============================================================================


class ValueFactory(ABC):
    """Factory that creates product values for some attribute types."""

    @abstractmethod
    def create(
        self,
        attribute: Attribute,
        channel_code: str | None,
        locale_code: str | None,
        data: Any,
    ) -> Value:
        """Create a value and set its data.

        Args:
            attribute: Attribute the value belongs to.
            channel_code: Channel code, for scopable attributes.
            locale_code: Locale code, for localizable attributes.
            data: Raw value data.

        Returns:
            The created value.
        """

    @abstractmethod
    def supports(self, attribute_type: str) -> bool:
        """Check if the factory creates values of an attribute type.

        Args:
            attribute_type: Attribute type tag.

        Returns:
            True if supported.
        """


class AttributeTypeValueFactory(ValueFactory):
    """Base for factories serving a fixed set of attribute types."""

    supported_types: frozenset[AttributeType] = frozenset()

    def supports(self, attribute_type: str) -> bool:
        return any(attribute_type == supported for supported in self.supported_types)

    def create(
        self,
        attribute: Attribute,
        channel_code: str | None,
        locale_code: str | None,
        data: Any,
    ) -> Value:
        if data is not None:
            data = self._prepare_data(attribute, data)
        return self._build(attribute, channel_code, locale_code, data)

    @abstractmethod
    def _prepare_data(self, attribute: Attribute, data: Any) -> Any:
        """Check and convert non-null data.

        Raises:
            InvalidValueDataError: If the data does not fit the type.
        """

    @abstractmethod
    def _build(
        self,
        attribute: Attribute,
        channel_code: str | None,
        locale_code: str | None,
        data: Any,
    ) -> Value:
        """Instantiate the value class."""


# ============================================================================
# Concrete Factories
# ============================================================================


def _to_finite_decimal(attribute: Attribute, raw: Any, expected: str, data: Any) -> Decimal:
    """Convert raw numeric data, rejecting NaN and infinities."""
    try:
        amount = Decimal(str(raw))
    except InvalidOperation:
        raise InvalidValueDataError(attribute.code, expected, data) from None
    if not amount.is_finite():
        raise InvalidValueDataError(attribute.code, expected, data)
    return amount


class ScalarValueFactory(AttributeTypeValueFactory):
    """Creates values of identifier, text, textarea, number and boolean attributes."""

    supported_types = frozenset(
        {
            AttributeType.IDENTIFIER,
            AttributeType.TEXT,
            AttributeType.TEXTAREA,
            AttributeType.NUMBER,
            AttributeType.BOOLEAN,
        }
    )

    def _prepare_data(self, attribute: Attribute, data: Any) -> Any:
        if attribute.type == AttributeType.BOOLEAN:
            if not isinstance(data, bool):
                raise InvalidValueDataError(attribute.code, "a boolean", data)
            return data

        if attribute.type == AttributeType.NUMBER:
            if isinstance(data, bool) or not isinstance(data, (int, float, Decimal, str)):
                raise InvalidValueDataError(attribute.code, "a number", data)
            amount = _to_finite_decimal(attribute, data, "a finite number", data)
            return amount if isinstance(data, str) else data

        if not isinstance(data, str):
            raise InvalidValueDataError(attribute.code, "a string", data)
        return data

    def _build(self, attribute, channel_code, locale_code, data) -> Value:
        return ScalarValue(attribute, data, locale=locale_code, scope=channel_code)


class DateValueFactory(AttributeTypeValueFactory):
    """Creates values of date attributes from dates or ISO 8601 strings."""

    supported_types = frozenset({AttributeType.DATE})

    def _prepare_data(self, attribute: Attribute, data: Any) -> date:
        if isinstance(data, datetime):
            return data.date()
        if isinstance(data, date):
            return data
        if isinstance(data, str):
            try:
                return datetime.fromisoformat(data).date()
            except ValueError:
                raise InvalidValueDataError(
                    attribute.code, "an ISO 8601 date", data
                ) from None
        raise InvalidValueDataError(attribute.code, "a date", data)

    def _build(self, attribute, channel_code, locale_code, data) -> Value:
        return DateValue(attribute, data, locale=locale_code, scope=channel_code)


class MetricValueFactory(AttributeTypeValueFactory):
    """Creates values of metric attributes from ``{"amount", "unit"}`` data."""

    supported_types = frozenset({AttributeType.METRIC})

    def _prepare_data(self, attribute: Attribute, data: Any) -> Metric:
        if isinstance(data, Metric):
            return data
        if not isinstance(data, dict) or "amount" not in data or "unit" not in data:
            raise InvalidValueDataError(
                attribute.code, 'a mapping with "amount" and "unit"', data
            )
        amount = _to_finite_decimal(attribute, data["amount"], "a numeric amount", data)
        return Metric(amount=amount, unit=str(data["unit"]))

    def _build(self, attribute, channel_code, locale_code, data) -> Value:
        return MetricValue(attribute, data, locale=locale_code, scope=channel_code)


class PriceCollectionValueFactory(AttributeTypeValueFactory):
    """Creates price collection values from ``[{"amount", "currency"}, ...]`` data.

    One price is kept per currency, the last one given wins, and prices
    are ordered by currency code.
    """

    supported_types = frozenset({AttributeType.PRICE_COLLECTION})

    def _prepare_data(self, attribute: Attribute, data: Any) -> tuple[Price, ...]:
        if isinstance(data, (str, bytes, dict)) or not isinstance(data, Iterable):
            raise InvalidValueDataError(attribute.code, "a list of prices", data)

        prices: dict[str, Price] = {}
        for item in data:
            price = self._to_price(attribute, item)
            prices[price.currency] = price
        return tuple(prices[currency] for currency in sorted(prices))

    def _to_price(self, attribute: Attribute, item: Any) -> Price:
        if isinstance(item, Price):
            return item
        if not isinstance(item, dict) or "currency" not in item:
            raise InvalidValueDataError(
                attribute.code, 'prices with "amount" and "currency"', item
            )
        amount = item.get("amount")
        if amount is not None:
            amount = _to_finite_decimal(attribute, amount, "a numeric price amount", item)
        return Price(amount=amount, currency=str(item["currency"]))

    def _build(self, attribute, channel_code, locale_code, data) -> Value:
        return PriceCollectionValue(
            attribute, data or (), locale=locale_code, scope=channel_code
        )


class OptionValueFactory(AttributeTypeValueFactory):
    """Creates values of simple select attributes from an option code."""

    supported_types = frozenset({AttributeType.SIMPLESELECT})

    def _prepare_data(self, attribute: Attribute, data: Any) -> str:
        if not isinstance(data, str):
            raise InvalidValueDataError(attribute.code, "an option code", data)
        return data

    def _build(self, attribute, channel_code, locale_code, data) -> Value:
        return OptionValue(attribute, data, locale=locale_code, scope=channel_code)


class OptionsValueFactory(AttributeTypeValueFactory):
    """Creates values of multi select attributes from option codes.

    Duplicate codes are dropped and the remaining ones sorted.
    """

    supported_types = frozenset({AttributeType.MULTISELECT})

    def _prepare_data(self, attribute: Attribute, data: Any) -> tuple[str, ...]:
        if isinstance(data, (str, bytes, dict)) or not isinstance(data, Iterable):
            raise InvalidValueDataError(attribute.code, "a list of option codes", data)
        codes = list(data)
        if not all(isinstance(code, str) for code in codes):
            raise InvalidValueDataError(attribute.code, "a list of option codes", data)
        return tuple(sorted(set(codes)))

    def _build(self, attribute, channel_code, locale_code, data) -> Value:
        return OptionsValue(attribute, data or (), locale=locale_code, scope=channel_code)


# ============================================================================
# Dispatcher
# ============================================================================


class ChainedValueFactory(ValueFactory):
    """Dispatches value creation to the first supporting factory.

    Example usage:
        factory = ChainedValueFactory([ScalarValueFactory(), DateValueFactory()])
        value = factory.create(release_date, "ecommerce", None, "2024-03-01")
    """

    def __init__(self, factories: Iterable[ValueFactory] = ()) -> None:
        """Initialize with factories, in priority order.

        Args:
            factories: Factories to dispatch to.
        """
        self._factories: list[ValueFactory] = list(factories)

    def register(self, factory: ValueFactory) -> None:
        """Append a factory to the chain.

        Args:
            factory: Factory to register.
        """
        self._factories.append(factory)

    @property
    def factories(self) -> list[ValueFactory]:
        """Get registered factories, in priority order."""
        return list(self._factories)

    def supports(self, attribute_type: str) -> bool:
        return any(factory.supports(attribute_type) for factory in self._factories)

    def create(
        self,
        attribute: Attribute,
        channel_code: str | None,
        locale_code: str | None,
        data: Any,
    ) -> Value:
        """Create a value with the first factory supporting the attribute type.

        Raises:
            UnsupportedAttributeTypeError: If no factory supports the type.
            InvalidValueDataError: If the data does not fit the attribute type.
        """
        for factory in self._factories:
            if factory.supports(attribute.type):
                return factory.create(attribute, channel_code, locale_code, data)

        logger.warning(
            "No value factory for attribute type",
            attribute_code=attribute.code,
            attribute_type=str(attribute.type),
        )
        raise UnsupportedAttributeTypeError(
            str(attribute.type), self._supported_types()
        )

    def _supported_types(self) -> list[str]:
        types: set[str] = set()
        for factory in self._factories:
            types.update(str(t) for t in getattr(factory, "supported_types", ()))
        return sorted(types)


def default_value_factory() -> ChainedValueFactory:
    """Build a dispatcher over all built-in value factories.

    Returns:
        ChainedValueFactory supporting every AttributeType.
    """
    return ChainedValueFactory(
        [
            ScalarValueFactory(),
            DateValueFactory(),
            MetricValueFactory(),
            PriceCollectionValueFactory(),
            OptionValueFactory(),
            OptionsValueFactory(),
        ]
    )
