"""Product API endpoints.

Provides CRUD and listing endpoints for the product catalog.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, status

from catalog_api.api.schemas import (
    ErrorResponse,
    MessageResponse,
    PaginationSchema,
    ProductListResponse,
    ProductRequest,
    ProductResponse,
)
from catalog_api.application.product_service import ProductService, get_product_service
from catalog_api.domain.entities import Product
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.context import RequestContext

router = APIRouter(prefix="/api/v1/product", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service() -> ProductService:
    """Get product service."""
    return get_product_service()


def get_context(request: Request) -> RequestContext:
    """Get the context opened by RequestContextMiddleware.

    Falls back to a fresh context when the app runs without the middleware.
    """
    ctx = getattr(request.state, "context", None)
    if ctx is None:
        ctx = RequestContext.create(
            request_id=getattr(request.state, "request_id", None),
            timeout_seconds=settings.request_timeout_seconds,
        )
    return ctx


Service = Annotated[ProductService, Depends(get_service)]
Context = Annotated[RequestContext, Depends(get_context)]
ProductBody = Annotated[dict[str, Any], Body()]


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product entity to response schema."""
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        price=product.price,
        description=product.description,
        latitude=product.location.latitude if product.location else None,
        longitude=product.location.longitude if product.location else None,
        created_at=product.created_at,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Get a product by ID",
)
async def get_product(product_id: str, service: Service, ctx: Context) -> ProductResponse:
    """Get a product by ID.

    Args:
        product_id: Product identifier.
        service: Product service.
        ctx: Request context.

    Returns:
        Product details.
    """
    product = await service.get_product(ctx, product_id)
    return product_to_response(product)


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List products",
    description=(
        "List products, newest first. Supplying latitude and longitude restricts "
        "results to the search radius and orders them by distance; keyword "
        "matches name or description, ignoring case."
    ),
)
async def list_products(
    service: Service,
    ctx: Context,
    page: Annotated[str | None, Query(description="Page number")] = None,
    limit: Annotated[str | None, Query(description="Number of items per page")] = None,
    latitude: Annotated[str | None, Query(description="Search origin latitude")] = None,
    longitude: Annotated[str | None, Query(description="Search origin longitude")] = None,
    keyword: Annotated[str | None, Query(description="Search keyword")] = None,
) -> ProductListResponse:
    """List products.

    Query parameters are passed through as strings; the service is the
    single place they are parsed and validated.
    """
    result = await service.list_products(
        ctx,
        page=page,
        limit=limit,
        latitude=latitude,
        longitude=longitude,
        keyword=keyword,
    )
    meta = result.pagination
    return ProductListResponse(
        items=[product_to_response(p) for p in result.items],
        pagination=PaginationSchema(
            page=meta.page,
            limit=meta.limit,
            total_items=meta.total_items,
            total_pages=meta.total_pages,
        ),
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Create a new product",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": ProductRequest.model_json_schema()}}
        }
    },
)
async def create_product(payload: ProductBody, service: Service, ctx: Context) -> ProductResponse:
    """Create a new product.

    Args:
        payload: Product fields.
        service: Product service.
        ctx: Request context.

    Returns:
        Created product with its identifier.
    """
    product = await service.create_product(ctx, payload)
    return product_to_response(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update a product by ID",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": ProductRequest.model_json_schema()}}
        }
    },
)
async def update_product(
    product_id: str,
    payload: ProductBody,
    service: Service,
    ctx: Context,
) -> ProductResponse:
    """Replace a product's fields.

    Args:
        product_id: Product identifier.
        payload: New product fields.
        service: Product service.
        ctx: Request context.

    Returns:
        Updated product.
    """
    product = await service.update_product(ctx, product_id, payload)
    return product_to_response(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete a product by ID",
)
async def delete_product(product_id: str, service: Service, ctx: Context) -> MessageResponse:
    """Delete a product.

    Args:
        product_id: Product identifier.
        service: Product service.
        ctx: Request context.

    Returns:
        Confirmation message.
    """
    await service.delete_product(ctx, product_id)
    return MessageResponse(message="Deleted successfully")
