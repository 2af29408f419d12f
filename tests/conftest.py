"""Shared fixtures for catalog tests."""

from datetime import datetime, timedelta, timezone

import pytest

from catalog_api.application.product_service import reset_product_repository
from catalog_api.catalog.repository import InMemoryProductRepository
from catalog_api.domain import GeoPoint, Product
from catalog_api.infrastructure.context import RequestContext

BERLIN = GeoPoint(latitude=52.52, longitude=13.405)


@pytest.fixture(autouse=True)
def reset_repository():
    """Reset the process-wide repository before and after each test."""
    reset_product_repository()
    yield
    reset_product_repository()


@pytest.fixture
def ctx() -> RequestContext:
    """Request context without a deadline."""
    return RequestContext(request_id="test-request")


@pytest.fixture
def repository() -> InMemoryProductRepository:
    """Empty in-memory repository."""
    return InMemoryProductRepository()


@pytest.fixture
def sample_products() -> list[Product]:
    """Products with distinct creation times, oldest first."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        Product(
            name="Oak Chair",
            price=120.0,
            description="Solid wood",
            location=GeoPoint(latitude=52.53, longitude=13.41),
            created_at=base,
        ),
        Product(
            name="Desk",
            price=300.0,
            description="Fits any CHAIR",
            location=GeoPoint(latitude=52.55, longitude=13.45),
            created_at=base + timedelta(hours=1),
        ),
        Product(
            name="Lamp",
            price=35.5,
            location=GeoPoint(latitude=53.55, longitude=9.99),
            created_at=base + timedelta(hours=2),
        ),
        Product(
            name="Rug",
            price=80.0,
            description="Woven",
            created_at=base + timedelta(hours=3),
        ),
    ]
