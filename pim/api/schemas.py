"""API schemas for the PIM API.

Pydantic models for request/response validation and serialization.
"""

from pydantic import BaseModel, Field

from pim.catalog.category_tree import RootCategory


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Category Tree Schemas
# ============================================================================


class RootCategorySchema(BaseModel):
    """A category tree root with its product count."""

    id: int | None = Field(..., description="Category database identifier")
    code: str = Field(..., description="Unique category code")
    label: str = Field(
        ..., description="Label in the requested locale, or [code] when missing"
    )
    count: int = Field(..., ge=0, description="Number of products counted for the tree")
    selected: bool = Field(
        default=False, description="Whether this is the tree to expand"
    )

    @classmethod
    def from_root(cls, root: RootCategory, locale: str) -> "RootCategorySchema":
        """Build the schema of a counted root category."""
        return cls(**root.to_dict(locale))
