"""Domain exceptions.

All domain-level errors raised by catalog entities and value factories
when an invariant does not hold or a request cannot be served.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors inherit from this class so the API layer can
    render them uniformly.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Product Errors
# ============================================================================


class ProductError(DomainError):
    """Base class for product-related errors."""

    pass


class MissingIdentifierError(ProductError):
    """Raised when a product holds no value of the identifier attribute type."""

    error_code = "MISSING_IDENTIFIER"

    def __init__(self, product_id: str | None) -> None:
        """Initialize missing identifier error.

        Args:
            product_id: ID of the product.
        """
        super().__init__(
            f"Product {product_id} has no identifier value",
            details={"product_id": product_id},
        )


# ============================================================================
# Value Errors
# ============================================================================


class ValueCreationError(DomainError):
    """Base class for value creation errors."""

    pass


class UnsupportedAttributeTypeError(ValueCreationError):
    """Raised when no value factory supports an attribute type."""

    error_code = "UNSUPPORTED_ATTRIBUTE_TYPE"

    def __init__(self, attribute_type: str, supported_types: list[str] | None = None) -> None:
        """Initialize unsupported attribute type error.

        Args:
            attribute_type: The attribute type that was requested.
            supported_types: Attribute types the registered factories handle.
        """
        supported = supported_types or []
        super().__init__(
            f"No value factory supports attribute type '{attribute_type}'",
            details={"attribute_type": attribute_type, "supported_types": supported},
        )


class InvalidValueDataError(ValueCreationError):
    """Raised when value data does not fit the attribute type."""

    error_code = "INVALID_VALUE_DATA"

    def __init__(self, attribute_code: str, expected: str, data: Any) -> None:
        """Initialize invalid value data error.

        Args:
            attribute_code: Code of the attribute the value was built for.
            expected: Description of the expected data shape.
            data: The rejected data.
        """
        super().__init__(
            f"Attribute '{attribute_code}' expects {expected}, "
            f"{type(data).__name__} given",
            details={
                "attribute_code": attribute_code,
                "expected": expected,
                "given_type": type(data).__name__,
            },
        )
