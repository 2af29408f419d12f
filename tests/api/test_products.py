"""Tests for product API endpoints."""

import time
from uuid import UUID, uuid4

from fastapi.testclient import TestClient

from catalog_api.api.products import get_context, get_service
from catalog_api.application.product_service import ProductService
from catalog_api.catalog.repository import InMemoryProductRepository
from catalog_api.domain import PersistenceError
from catalog_api.infrastructure.context import RequestContext
from catalog_api.main import app

BASE = "/api/v1/product"


class FailingRepository(InMemoryProductRepository):
    """Repository whose inserts fail with a given error."""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    async def store(self, ctx, product):
        raise self.error


class TestCreateProduct:
    """Tests for POST /api/v1/product."""

    def test_create(self, client: TestClient) -> None:
        """Should create a product and return it with an ID."""
        response = client.post(
            BASE,
            json={
                "name": "Chair",
                "price": 100,
                "description": "Comfortable",
                "latitude": 52.52,
                "longitude": 13.405,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert UUID(data["id"])
        assert data["name"] == "Chair"
        assert data["price"] == 100
        assert data["latitude"] == 52.52
        assert data["longitude"] == 13.405
        assert "created_at" in data

    def test_create_ignores_client_id(self, client: TestClient) -> None:
        """Client-supplied IDs are replaced."""
        response = client.post(BASE, json={"id": "mine", "name": "Chair", "price": 1})

        assert response.status_code == 201
        assert response.json()["id"] != "mine"

    def test_create_invalid(self, client: TestClient) -> None:
        """Invalid payloads return 422 with field details."""
        response = client.post(BASE, json={"name": "", "price": -5})

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert {d["field"] for d in data["details"]} == {"name", "price"}
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_create_non_object_body(self, client: TestClient) -> None:
        """Bodies that are not JSON objects are malformed input."""
        response = client.post(BASE, json=["Chair", 100])

        assert response.status_code == 400
        assert response.json()["error_code"] == "MALFORMED_INPUT"

    def test_create_unparseable_json(self, client: TestClient) -> None:
        """Bodies that are not valid JSON return 400, not 422."""
        response = client.post(
            BASE,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "MALFORMED_INPUT"
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_update_unparseable_json(self, client: TestClient, created_product: dict) -> None:
        """Unparseable update bodies return 400 and change nothing."""
        url = f"{BASE}/{created_product['id']}"
        response = client.put(
            url,
            content=b'{"name": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert client.get(url).json() == created_product

    def test_storage_failure(self, client: TestClient) -> None:
        """Storage failures return 500 without leaking as unhandled errors."""
        app.dependency_overrides[get_service] = lambda: ProductService(
            FailingRepository(PersistenceError("store", "connection refused"))
        )

        response = client.post(BASE, json={"name": "Chair", "price": 1})

        assert response.status_code == 500
        assert response.json()["error_code"] == "PERSISTENCE_ERROR"

    def test_constraint_violation(self, client: TestClient) -> None:
        """Data rejected by the store returns 400."""
        app.dependency_overrides[get_service] = lambda: ProductService(
            FailingRepository(
                PersistenceError("store", "duplicate key", constraint_violation=True)
            )
        )

        response = client.post(BASE, json={"name": "Chair", "price": 1})

        assert response.status_code == 400
        assert response.json()["error_code"] == "PERSISTENCE_ERROR"


class TestGetProduct:
    """Tests for GET /api/v1/product/{id}."""

    def test_get(self, client: TestClient, created_product: dict) -> None:
        """Should return a stored product."""
        response = client.get(f"{BASE}/{created_product['id']}")

        assert response.status_code == 200
        assert response.json() == created_product

    def test_get_missing(self, client: TestClient) -> None:
        """Unknown IDs return 404."""
        response = client.get(f"{BASE}/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    def test_get_malformed(self, client: TestClient) -> None:
        """Malformed IDs return 400."""
        response = client.get(f"{BASE}/not-an-id")

        assert response.status_code == 400
        assert response.json()["error_code"] == "MALFORMED_IDENTIFIER"

    def test_deadline_exceeded(self, client: TestClient, created_product: dict) -> None:
        """Requests whose deadline has passed return 504."""
        app.dependency_overrides[get_context] = lambda: RequestContext(
            deadline=time.monotonic() - 1
        )

        response = client.get(f"{BASE}/{created_product['id']}")

        assert response.status_code == 504
        assert response.json()["error_code"] == "OPERATION_CANCELLED"


class TestListProducts:
    """Tests for GET /api/v1/product."""

    def test_empty(self, client: TestClient) -> None:
        """Empty catalog returns no items and zero totals."""
        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json() == {
            "items": [],
            "pagination": {"page": 1, "limit": 10, "total_items": 0, "total_pages": 0},
        }

    def test_keyword(self, client: TestClient, created_product: dict) -> None:
        """Keyword search finds the created product."""
        client.post(BASE, json={"name": "Table", "price": 50})

        response = client.get(BASE, params={"keyword": "CHAIR"})

        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["items"]] == [created_product["id"]]
        assert data["pagination"]["total_items"] == 1

    def test_newest_first_with_paging(self, client: TestClient) -> None:
        """Listing is newest first and paged."""
        for name in ("First", "Second", "Third"):
            client.post(BASE, json={"name": name, "price": 1})

        response = client.get(BASE, params={"page": 1, "limit": 2})

        data = response.json()
        assert [p["name"] for p in data["items"]] == ["Third", "Second"]
        assert data["pagination"] == {
            "page": 1,
            "limit": 2,
            "total_items": 3,
            "total_pages": 2,
        }

    def test_normalized_paging(self, client: TestClient) -> None:
        """Out-of-range paging values are normalized."""
        response = client.get(BASE, params={"page": -1, "limit": 1000})

        assert response.status_code == 200
        assert response.json()["pagination"]["page"] == 1
        assert response.json()["pagination"]["limit"] == 100

    def test_huge_page(self, client: TestClient, created_product: dict) -> None:
        """Page numbers far past the end return no items and true totals."""
        huge_page = 9223372036854775807

        response = client.get(BASE, params={"page": huge_page})

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["pagination"]["page"] == huge_page
        assert data["pagination"]["total_items"] == 1
        assert data["pagination"]["total_pages"] == 1

    def test_geo(self, client: TestClient) -> None:
        """Geo search returns nearby products by distance."""
        client.post(BASE, json={"name": "Far", "price": 1, "latitude": 52.56, "longitude": 13.45})
        client.post(BASE, json={"name": "Near", "price": 1, "latitude": 52.521, "longitude": 13.406})
        client.post(BASE, json={"name": "Hamburg", "price": 1, "latitude": 53.55, "longitude": 9.99})

        response = client.get(BASE, params={"latitude": 52.52, "longitude": 13.405})

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["items"]] == ["Near", "Far"]

    def test_partial_location(self, client: TestClient) -> None:
        """Only one coordinate returns 400 naming the missing one."""
        response = client.get(BASE, params={"latitude": 10})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "INVALID_FILTER"
        assert data["details"][0]["field"] == "longitude"

    def test_latitude_out_of_range(self, client: TestClient) -> None:
        """Out-of-range latitude returns 400."""
        response = client.get(BASE, params={"latitude": -95, "longitude": 10})

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "latitude"

    def test_non_integer_page(self, client: TestClient) -> None:
        """Non-integer page returns 400."""
        response = client.get(BASE, params={"page": "two"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_FILTER"


class TestUpdateProduct:
    """Tests for PUT /api/v1/product/{id}."""

    def test_update(self, client: TestClient, created_product: dict) -> None:
        """Should replace the product's fields."""
        response = client.put(
            f"{BASE}/{created_product['id']}",
            json={"name": "Armchair", "price": 150},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created_product["id"]
        assert data["created_at"] == created_product["created_at"]
        assert data["name"] == "Armchair"
        assert data["description"] is None

    def test_update_missing(self, client: TestClient) -> None:
        """Unknown IDs return 404."""
        response = client.put(f"{BASE}/{uuid4()}", json={"name": "Chair", "price": 1})

        assert response.status_code == 404

    def test_update_invalid_body(self, client: TestClient, created_product: dict) -> None:
        """Invalid bodies return 422 and leave the product unchanged."""
        response = client.put(f"{BASE}/{created_product['id']}", json={"price": "cheap"})

        assert response.status_code == 422
        assert client.get(f"{BASE}/{created_product['id']}").json() == created_product

    def test_update_malformed_id(self, client: TestClient) -> None:
        """Malformed IDs with a valid body return 400."""
        response = client.put(f"{BASE}/123", json={"name": "Chair", "price": 1})

        assert response.status_code == 400


class TestDeleteProduct:
    """Tests for DELETE /api/v1/product/{id}."""

    def test_delete(self, client: TestClient, created_product: dict) -> None:
        """Should delete and confirm."""
        url = f"{BASE}/{created_product['id']}"

        response = client.delete(url)

        assert response.status_code == 200
        assert response.json() == {"message": "Deleted successfully"}
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404

    def test_delete_malformed(self, client: TestClient) -> None:
        """Malformed IDs return 400."""
        assert client.delete(f"{BASE}/abc").status_code == 400
