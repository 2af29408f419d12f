"""Product payload validation.

Incoming create/update bodies are validated here before they become
domain entities.
"""

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from catalog_api.domain.entities import Product
from catalog_api.domain.exceptions import ProductValidationError
from catalog_api.domain.value_objects import GeoPoint


class ProductPayload(BaseModel):
    """Writable product fields as accepted from clients."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=500)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    description: str | None = Field(default=None, max_length=5000)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def check_location(self) -> Self:
        """Require latitude and longitude together."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be supplied together")
        return self

    def to_product(self) -> Product:
        """Build an unpersisted product from the payload."""
        location = None
        if self.latitude is not None and self.longitude is not None:
            location = GeoPoint(latitude=self.latitude, longitude=self.longitude)
        return Product.create(
            name=self.name,
            price=self.price,
            description=self.description or None,
            location=location,
        )


def _field_errors(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in e["loc"]) or "payload",
            "message": e["msg"],
        }
        for e in error.errors()
    ]


def validate_product_payload(payload: Mapping[str, Any] | ProductPayload) -> Product:
    """Validate a raw payload and convert it to a product.

    Args:
        payload: Request body as parsed JSON, or an already built payload.

    Returns:
        Unpersisted product.

    Raises:
        ProductValidationError: If the payload is invalid.
    """
    if isinstance(payload, ProductPayload):
        return payload.to_product()
    try:
        return ProductPayload.model_validate(payload).to_product()
    except ValidationError as e:
        raise ProductValidationError(_field_errors(e)) from e
