"""Domain entities for the product catalog."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Self

from catalog_api.domain.base import Entity
from catalog_api.domain.value_objects import GeoPoint, ProductId


@dataclass(kw_only=True)
class Product(Entity[ProductId | None]):
    """A product in the catalog.

    The identifier is assigned by the repository on store and never
    changes afterwards. Everything except ``id`` and ``created_at`` is
    replaced wholesale on update.

    Attributes:
        id: Store-assigned identifier, ``None`` before the first store.
        name: Display name, never empty.
        price: Non-negative price.
        description: Free-text description searched by keyword.
        location: Where the product is offered, if known.
        created_at: Creation timestamp (UTC).
    """

    id: ProductId | None = None
    name: str
    price: float
    description: str | None = None
    location: GeoPoint | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        name: str,
        price: float,
        description: str | None = None,
        location: GeoPoint | None = None,
    ) -> Self:
        """Create a new, not yet persisted product.

        Args:
            name: Product name.
            price: Product price.
            description: Optional description.
            location: Optional location.

        Returns:
            Product without an identifier.
        """
        return cls(
            name=name,
            price=price,
            description=description,
            location=location,
        )

    def with_id(self, product_id: ProductId) -> Self:
        """Return a copy carrying the given identifier."""
        return replace(self, id=product_id)

    def replaced_by(self, other: "Product") -> Self:
        """Full replacement of mutable fields, keeping identity.

        Args:
            other: Product holding the new field values.

        Returns:
            Copy of this product with other's mutable fields.
        """
        return replace(
            self,
            name=other.name,
            price=other.price,
            description=other.description,
            location=other.location,
        )
