"""Domain layer - Entities, value objects and exceptions.

This module exports the core domain building blocks:

- **Entities**: Objects with identity (Product)
- **Value Objects**: Immutable objects compared by value (ProductId, GeoPoint)
- **Exceptions**: The error kinds every catalog operation can surface

Example usage:
    from catalog_api.domain import GeoPoint, Product

    chair = Product.create(
        name="Chair",
        price=100,
        location=GeoPoint(latitude=52.52, longitude=13.40),
    )
"""

# Base classes
from catalog_api.domain.base import Entity, ValueObject

# Entities
from catalog_api.domain.entities import Product

# Exceptions
from catalog_api.domain.exceptions import (
    DomainError,
    InvalidFilterError,
    MalformedIdentifierError,
    OperationCancelledError,
    PersistenceError,
    ProductNotFoundError,
    ProductValidationError,
)

# Value Objects
from catalog_api.domain.value_objects import EARTH_RADIUS_KM, KM_PER_DEGREE, GeoPoint, ProductId

__all__ = [
    # Base classes
    "Entity",
    "ValueObject",
    # Entities
    "Product",
    # Value Objects
    "EARTH_RADIUS_KM",
    "KM_PER_DEGREE",
    "GeoPoint",
    "ProductId",
    # Exceptions
    "DomainError",
    "InvalidFilterError",
    "MalformedIdentifierError",
    "OperationCancelledError",
    "PersistenceError",
    "ProductNotFoundError",
    "ProductValidationError",
]
