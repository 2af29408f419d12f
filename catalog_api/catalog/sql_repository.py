"""SQLAlchemy implementation of the product repository.

Each operation runs in its own session and transaction drawn from the
process-wide pool; a failure or cancellation rolls the transaction back.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import ColumnElement, and_, case, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.catalog.models import ProductModel
from catalog_api.catalog.query import GeoRadius, KeywordMatch, QueryExpression, SortOrder
from catalog_api.catalog.repository import ProductRepository
from catalog_api.domain.entities import Product
from catalog_api.domain.exceptions import PersistenceError, ProductNotFoundError
from catalog_api.domain.value_objects import GeoPoint, ProductId
from catalog_api.infrastructure.context import RequestContext

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so a keyword matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def longitude_delta(origin: GeoPoint) -> ColumnElement[float]:
    """SQL form of GeoPoint.longitude_delta from ``origin``."""
    delta = ProductModel.longitude - origin.longitude
    return case(
        (delta > 180.0, delta - 360.0),
        (delta < -180.0, delta + 360.0),
        else_=delta,
    )


def squared_distance(origin: GeoPoint) -> ColumnElement[float]:
    """SQL form of GeoPoint.squared_degree_distance from ``origin``."""
    dlat = ProductModel.latitude - origin.latitude
    dlon = longitude_delta(origin) * origin.longitude_scale
    return dlat * dlat + dlon * dlon


def build_conditions(query: QueryExpression) -> list[ColumnElement[bool]]:
    """Translate query predicates into SQLAlchemy conditions.

    Args:
        query: Compiled listing query.

    Returns:
        Conditions to AND together.
    """
    conditions: list[ColumnElement[bool]] = []

    for predicate in query.predicates:
        if isinstance(predicate, GeoRadius):
            conditions.append(
                and_(
                    ProductModel.latitude.is_not(None),
                    ProductModel.longitude.is_not(None),
                    squared_distance(predicate.origin) <= predicate.radius_degrees**2,
                )
            )
        elif isinstance(predicate, KeywordMatch):
            pattern = f"%{escape_like(predicate.keyword)}%"
            conditions.append(
                or_(
                    *(
                        getattr(ProductModel, name).ilike(pattern, escape=LIKE_ESCAPE)
                        for name in predicate.fields
                    )
                )
            )

    return conditions


def build_order(query: QueryExpression) -> list[Any]:
    """Translate the sort directive, ties broken by ID."""
    if query.sort == SortOrder.DISTANCE_ASC and query.sort_origin is not None:
        return [squared_distance(query.sort_origin).asc(), ProductModel.id.asc()]
    return [ProductModel.created_at.desc(), ProductModel.id.asc()]


class SqlProductRepository(ProductRepository):
    """Repository backed by a relational database.

    Example usage:
        repo = SqlProductRepository(get_session_factory())
        product = await repo.store(ctx, Product.create(name="Chair", price=100))
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: Factory for async SQLAlchemy sessions.
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def _transaction(
        self,
        operation: str,
        product_id: str | None = None,
        isolation_level: str | None = None,
    ) -> AsyncIterator[AsyncSession]:
        """Open a session with a transaction that commits on success.

        Args:
            operation: Operation name for error context.
            product_id: Product addressed, for error context.
            isolation_level: Optional isolation level for this transaction.

        Raises:
            PersistenceError: On any SQLAlchemy failure.
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    if isolation_level is not None:
                        await session.connection(
                            execution_options={"isolation_level": isolation_level}
                        )
                    yield session
        except IntegrityError as e:
            raise PersistenceError(
                operation, str(e.orig), product_id, constraint_violation=True
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceError(operation, str(e), product_id) from e

    async def find(self, ctx: RequestContext, product_id: ProductId) -> Product:
        """Get a product by ID."""
        ctx.raise_if_expired("find", str(product_id))
        async with self._transaction("find", str(product_id)) as session:
            model = await session.get(ProductModel, product_id.value)
            if model is None:
                raise ProductNotFoundError(str(product_id), "find")
            return model.to_entity()

    async def find_all(
        self,
        ctx: RequestContext,
        query: QueryExpression,
        skip: int,
        take: int,
    ) -> tuple[list[Product], int]:
        """Find a page of products matching a query.

        Count and page are read in one REPEATABLE READ transaction so
        both see the same snapshot. Pages past the last match are answered
        from the count alone, so any page number is accepted without
        reaching the database OFFSET limit.
        """
        ctx.raise_if_expired("find_all")
        conditions = build_conditions(query)

        count_stmt = select(func.count()).select_from(ProductModel).where(*conditions)
        page_stmt = (
            select(ProductModel)
            .where(*conditions)
            .order_by(*build_order(query))
            .offset(skip)
            .limit(take)
        )

        async with self._transaction("find_all", isolation_level="REPEATABLE READ") as session:
            total = (await session.execute(count_stmt)).scalar_one()
            if skip >= total:
                return [], total
            models = (await session.execute(page_stmt)).scalars().all()
            return [m.to_entity() for m in models], total

    async def store(self, ctx: RequestContext, product: Product) -> Product:
        """Insert a product under a fresh ID."""
        ctx.raise_if_expired("store")
        stored = product.with_id(ProductId.generate())
        async with self._transaction("store", str(stored.id)) as session:
            session.add(ProductModel.from_entity(stored))
        return stored

    async def update(self, ctx: RequestContext, product: Product) -> Product:
        """Replace a product's mutable fields."""
        product_id = str(product.id)
        ctx.raise_if_expired("update", product_id)
        if product.id is None:
            raise ProductNotFoundError(product_id, "update")

        async with self._transaction("update", product_id) as session:
            model = await session.get(ProductModel, product.id.value, with_for_update=True)
            if model is None:
                raise ProductNotFoundError(product_id, "update")
            model.apply(product)
            await session.flush()
            return model.to_entity()

    async def delete_by_id(self, ctx: RequestContext, product_id: ProductId) -> None:
        """Remove a product."""
        ctx.raise_if_expired("delete_by_id", str(product_id))
        async with self._transaction("delete_by_id", str(product_id)) as session:
            model = await session.get(ProductModel, product_id.value)
            if model is None:
                raise ProductNotFoundError(str(product_id), "delete_by_id")
            await session.delete(model)
