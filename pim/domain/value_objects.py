"""Value objects for the catalog domain.

Attribute type tags, typed value payloads (metrics, prices) and the
composite key under which a product exposes its values.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from pim.domain.base import ValueObject


# ============================================================================
# Attribute Types
# ============================================================================


class AttributeType(str, Enum):
    """Type tag of an attribute.

    The tag decides which value factory builds the attribute's values
    and the shape of the data those values hold. Members compare equal
    to their plain string tag.
    """

    IDENTIFIER = "identifier"
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    METRIC = "metric"
    PRICE_COLLECTION = "price_collection"
    SIMPLESELECT = "simpleselect"
    MULTISELECT = "multiselect"

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Value Payloads
# ============================================================================


@dataclass(frozen=True)
class Metric(ValueObject):
    """A measured amount with its unit (e.g. 12.5 KILOGRAM).

    Attributes:
        amount: Measured amount.
        unit: Unit code.
    """

    amount: Decimal
    unit: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary with amount as string and unit.
        """
        return {"amount": str(self.amount), "unit": self.unit}

    def __str__(self) -> str:
        return f"{self.amount} {self.unit}"


@dataclass(frozen=True)
class Price(ValueObject):
    """An amount in one currency.

    Attributes:
        amount: Price amount, None when the currency is enabled but unpriced.
        currency: ISO 4217 currency code.
    """

    amount: Decimal | None
    currency: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary with amount as string (or None) and currency.
        """
        return {
            "amount": None if self.amount is None else str(self.amount),
            "currency": self.currency,
        }

    def __str__(self) -> str:
        if self.amount is None:
            return self.currency
        return f"{self.amount} {self.currency}"


# ============================================================================
# Value Keys
# ============================================================================


def value_key(
    attribute_code: str,
    locale: str | None = None,
    scope: str | None = None,
    localizable: bool = False,
    scopable: bool = False,
) -> str:
    """Build the key a product exposes a value under.

    The attribute code is suffixed with ``_<locale>`` when the attribute
    is localizable, then with ``_<scope>`` when it is scopable.

    Args:
        attribute_code: Code of the value's attribute.
        locale: Locale code of the value.
        scope: Channel code of the value.
        localizable: Whether the attribute varies by locale.
        scopable: Whether the attribute varies by channel.

    Returns:
        Composite value key, e.g. ``description_en_US_ecommerce``.
    """
    key = attribute_code
    if localizable:
        key += f"_{locale or ''}"
    if scopable:
        key += f"_{scope or ''}"
    return key
