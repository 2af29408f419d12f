"""SQLAlchemy models for product catalog.

Defines the products table and conversion to and from the domain entity.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import DateTime, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.domain.entities import Product
from catalog_api.domain.value_objects import GeoPoint, ProductId
from catalog_api.infrastructure.database import Base


class ProductModel(Base):
    """Product row.

    Attributes:
        id: Product identifier (UUID).
        name: Product name.
        price: Product price.
        description: Product description.
        latitude: Location latitude, set together with longitude.
        longitude: Location longitude, set together with latitude.
        created_at: Creation timestamp.
    """

    __tablename__ = "products"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductModel(id={self.id}, name={self.name[:30]})>"

    @classmethod
    def from_entity(cls, product: Product) -> "ProductModel":
        """Build a row from a persisted product.

        Args:
            product: Product with an assigned ID.

        Returns:
            New, detached model instance.
        """
        if product.id is None:
            raise ValueError("Cannot map a product without an ID")
        model = cls(id=product.id.value, created_at=product.created_at)
        model.apply(product)
        return model

    def apply(self, product: Product) -> None:
        """Copy a product's mutable fields onto this row."""
        self.name = product.name
        self.price = product.price
        self.description = product.description
        self.latitude = product.location.latitude if product.location else None
        self.longitude = product.location.longitude if product.location else None

    def to_entity(self) -> Product:
        """Convert to the domain entity.

        Returns:
            Product with this row's values.
        """
        location = None
        if self.latitude is not None and self.longitude is not None:
            location = GeoPoint(latitude=self.latitude, longitude=self.longitude)
        return Product(
            id=ProductId(self.id),
            name=self.name,
            price=self.price,
            description=self.description,
            location=location,
            created_at=self.created_at,
        )
