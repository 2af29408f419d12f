"""API schemas for the catalog API.

Pydantic models for response serialization. Request bodies are
validated by the application layer.
"""

from datetime import datetime

from pydantic import BaseModel, Field


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


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class PaginationSchema(BaseModel):
    """Pagination metadata for a listing."""

    page: int = Field(..., description="Current page number (1-based)")
    limit: int = Field(..., description="Items per page")
    total_items: int = Field(..., description="Total number of matching items")
    total_pages: int = Field(..., description="Total number of pages")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductRequest(BaseModel):
    """Product payload, documented for OpenAPI."""

    name: str = Field(..., min_length=1, max_length=500, description="Product name")
    price: float = Field(..., ge=0, description="Product price")
    description: str | None = Field(default=None, description="Free-text description")
    latitude: float | None = Field(default=None, ge=-90, le=90, description="Location latitude")
    longitude: float | None = Field(
        default=None, ge=-180, le=180, description="Location longitude"
    )


class ProductResponse(BaseModel):
    """A product as returned by the API."""

    id: str = Field(..., description="Unique product identifier")
    name: str = Field(..., description="Product name")
    price: float = Field(..., description="Product price")
    description: str | None = Field(default=None, description="Product description")
    latitude: float | None = Field(default=None, description="Location latitude")
    longitude: float | None = Field(default=None, description="Location longitude")
    created_at: datetime = Field(..., description="When the product was created")


class ProductListResponse(BaseModel):
    """Paginated list of products."""

    items: list[ProductResponse] = Field(..., description="Products on this page")
    pagination: PaginationSchema = Field(..., description="Pagination metadata")
