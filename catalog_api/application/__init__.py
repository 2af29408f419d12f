"""Application layer - use cases orchestrating the catalog core.

Example usage:
    from catalog_api.application import get_product_service
    from catalog_api.infrastructure.context import RequestContext

    service = get_product_service()
    page = await service.list_products(RequestContext.create(), keyword="chair")
"""

from catalog_api.application.product_service import (
    ProductPage,
    ProductService,
    get_product_repository,
    get_product_service,
    reset_product_repository,
)
from catalog_api.application.validation import ProductPayload, validate_product_payload

__all__ = [
    "ProductPage",
    "ProductPayload",
    "ProductService",
    "get_product_repository",
    "get_product_service",
    "reset_product_repository",
    "validate_product_payload",
]
