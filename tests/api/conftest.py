"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from catalog_api.main import app


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Create test client, clearing dependency overrides afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def created_product(client: TestClient) -> dict:
    """A product created through the API."""
    response = client.post(
        "/api/v1/product",
        json={"name": "Chair", "price": 100, "description": "Comfortable"},
    )
    assert response.status_code == 201
    return response.json()
