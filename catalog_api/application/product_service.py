"""Product application service.

Orchestrates filter normalization, query building, repository access and
pagination, and makes sure every failure leaves as a domain error.
"""

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from catalog_api.application.validation import validate_product_payload
from catalog_api.catalog.filters import normalize_filter
from catalog_api.catalog.pagination import PaginationMeta, offsets, paginate
from catalog_api.catalog.query import QueryBuilder
from catalog_api.catalog.repository import InMemoryProductRepository, ProductRepository
from catalog_api.domain.entities import Product
from catalog_api.domain.exceptions import (
    DomainError,
    InvalidFilterError,
    MalformedIdentifierError,
    OperationCancelledError,
    PersistenceError,
    ProductValidationError,
)
from catalog_api.domain.value_objects import ProductId
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.context import RequestContext

logger = structlog.get_logger()

T = TypeVar("T")


# ============================================================================
# Repository Wiring
# ============================================================================


_product_repo: ProductRepository | None = None


def get_product_repository() -> ProductRepository:
    """Get the process-wide product repository.

    The backend is chosen by ``settings.storage_backend``.
    """
    global _product_repo
    if _product_repo is None:
        if settings.storage_backend == "database":
            from catalog_api.catalog.sql_repository import SqlProductRepository
            from catalog_api.infrastructure.database import get_session_factory

            _product_repo = SqlProductRepository(get_session_factory())
        else:
            _product_repo = InMemoryProductRepository()
        logger.info("Product repository ready", backend=settings.storage_backend)
    return _product_repo


def reset_product_repository() -> None:
    """Drop the process-wide repository (for testing)."""
    global _product_repo
    _product_repo = None


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class ProductPage:
    """A page of products with its metadata."""

    items: list[Product]
    pagination: PaginationMeta


# ============================================================================
# Product Service
# ============================================================================


class ProductService:
    """Application service for the product catalog.

    Every repository call is attempted once, under the deadline carried
    by the request context. Validation and filter errors surface as
    raised; repository failures that are not already domain errors are
    wrapped in PersistenceError with the operation and product ID.
    """

    def __init__(
        self,
        repository: ProductRepository,
        query_builder: QueryBuilder | None = None,
    ) -> None:
        """Initialize service.

        Args:
            repository: Product repository.
            query_builder: Listing query builder.
        """
        self.repository = repository
        self.query_builder = query_builder or QueryBuilder(settings.geo_search_radius_km)

    async def get_product(self, ctx: RequestContext, product_id: str) -> Product:
        """Get a product by ID.

        Args:
            ctx: Request context.
            product_id: Product identifier as received.

        Returns:
            The product.

        Raises:
            MalformedIdentifierError: If the ID is not a valid identifier.
            ProductNotFoundError: If no product has this ID.
        """
        pid = self._parse_id(ctx, product_id)
        product = await self._call(ctx, "find", self.repository.find(ctx, pid), str(pid))
        ctx.logger.debug("Product fetched", product_id=str(pid))
        return product

    async def list_products(
        self,
        ctx: RequestContext,
        page: Any = None,
        limit: Any = None,
        latitude: Any = None,
        longitude: Any = None,
        keyword: Any = None,
    ) -> ProductPage:
        """List products matching raw listing parameters.

        Args:
            ctx: Request context.
            page: Requested page.
            limit: Requested page size.
            latitude: Geo search latitude.
            longitude: Geo search longitude.
            keyword: Search keyword.

        Returns:
            ProductPage with items and pagination metadata.

        Raises:
            InvalidFilterError: If the parameters cannot be normalized.
        """
        try:
            product_filter = normalize_filter(page, limit, latitude, longitude, keyword)
        except InvalidFilterError as e:
            ctx.logger.warning("Invalid listing filter", error=e.message, **e.details)
            raise

        query = self.query_builder.build(product_filter)
        skip, take = offsets(product_filter.page, product_filter.limit)

        items, total = await self._call(
            ctx, "find_all", self.repository.find_all(ctx, query, skip, take)
        )
        result = paginate(product_filter.page, product_filter.limit, total)

        ctx.logger.debug(
            "Products listed",
            page=result.meta.page,
            limit=result.meta.limit,
            total_items=result.meta.total_items,
            returned=len(items),
            sort=query.sort.value,
        )

        return ProductPage(items=items, pagination=result.meta)

    async def create_product(
        self,
        ctx: RequestContext,
        payload: Mapping[str, Any],
    ) -> Product:
        """Create a product from a raw payload.

        Args:
            ctx: Request context.
            payload: Product fields, without an identifier.

        Returns:
            Stored product with its assigned ID.

        Raises:
            ProductValidationError: If the payload is invalid.
        """
        product = self._validate(ctx, payload)
        stored = await self._call(ctx, "store", self.repository.store(ctx, product))
        ctx.logger.info("Product created", product_id=str(stored.id), name=stored.name)
        return stored

    async def update_product(
        self,
        ctx: RequestContext,
        product_id: str,
        payload: Mapping[str, Any],
    ) -> Product:
        """Replace a product's fields.

        Args:
            ctx: Request context.
            product_id: Product identifier as received.
            payload: New product fields.

        Returns:
            Updated product.

        Raises:
            ProductValidationError: If the payload is invalid.
            MalformedIdentifierError: If the ID is not a valid identifier.
            ProductNotFoundError: If no product has this ID.
        """
        product = self._validate(ctx, payload)
        pid = self._parse_id(ctx, product_id)
        updated = await self._call(
            ctx, "update", self.repository.update(ctx, product.with_id(pid)), str(pid)
        )
        ctx.logger.info("Product updated", product_id=str(pid))
        return updated

    async def delete_product(self, ctx: RequestContext, product_id: str) -> None:
        """Delete a product.

        Args:
            ctx: Request context.
            product_id: Product identifier as received.

        Raises:
            MalformedIdentifierError: If the ID is not a valid identifier.
            ProductNotFoundError: If no product has this ID.
        """
        pid = self._parse_id(ctx, product_id)
        await self._call(ctx, "delete_by_id", self.repository.delete_by_id(ctx, pid), str(pid))
        ctx.logger.info("Product deleted", product_id=str(pid))

    def _parse_id(self, ctx: RequestContext, product_id: str) -> ProductId:
        try:
            return ProductId.from_string(product_id)
        except MalformedIdentifierError:
            ctx.logger.warning("Malformed product identifier", product_id=product_id)
            raise

    def _validate(self, ctx: RequestContext, payload: Mapping[str, Any]) -> Product:
        try:
            return validate_product_payload(payload)
        except ProductValidationError as e:
            ctx.logger.warning("Product validation failed", errors=e.errors)
            raise

    async def _call(
        self,
        ctx: RequestContext,
        operation: str,
        call: Awaitable[T],
        product_id: str | None = None,
    ) -> T:
        """Await one repository call under the context deadline.

        Raises:
            OperationCancelledError: If the deadline passes first.
            PersistenceError: If the repository fails with a non-domain error.
        """
        timeout = ctx.timeout()
        try:
            async with timeout:
                return await call
        except PersistenceError as e:
            ctx.logger.error("Repository operation failed", **e.details)
            raise
        except DomainError as e:
            ctx.logger.warning(
                "Repository operation rejected",
                error_type=type(e).__name__,
                error=e.message,
                operation=operation,
                product_id=product_id,
            )
            raise
        except TimeoutError as e:
            if not timeout.expired():
                ctx.logger.error(
                    "Repository operation timed out", operation=operation, product_id=product_id
                )
                raise PersistenceError(operation, "storage timeout", product_id) from e
            ctx.logger.warning(
                "Repository operation cancelled", operation=operation, product_id=product_id
            )
            raise OperationCancelledError(operation, product_id) from e
        except Exception as e:
            ctx.logger.error(
                "Repository operation failed",
                operation=operation,
                product_id=product_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceError(operation, str(e), product_id) from e


# ============================================================================
# Service Factory
# ============================================================================


def get_product_service() -> ProductService:
    """Get product service instance.

    Returns:
        ProductService bound to the process-wide repository.
    """
    return ProductService(
        repository=get_product_repository(),
        query_builder=QueryBuilder(settings.geo_search_radius_km),
    )


__all__ = [
    "ProductPage",
    "ProductService",
    "get_product_repository",
    "get_product_service",
    "reset_product_repository",
]
