"""Product repository contract and in-memory implementation.

ProductRepository is the persistence boundary of the catalog. Every
operation takes the caller's RequestContext so a deadline set at the
edge reaches storage.
"""

from abc import ABC, abstractmethod
from dataclasses import replace

from catalog_api.catalog.query import GeoRadius, KeywordMatch, QueryExpression, SortOrder
from catalog_api.domain.entities import Product
from catalog_api.domain.exceptions import ProductNotFoundError
from catalog_api.domain.value_objects import ProductId
from catalog_api.infrastructure.context import RequestContext


class ProductRepository(ABC):
    """Persistence contract for products.

    Implementations must raise ProductNotFoundError for missing records,
    PersistenceError for storage failures and OperationCancelledError
    when the context deadline has passed before work starts.
    """

    @abstractmethod
    async def find(self, ctx: RequestContext, product_id: ProductId) -> Product:
        """Get a product by ID.

        Args:
            ctx: Request context.
            product_id: Product ID.

        Returns:
            The stored product.

        Raises:
            ProductNotFoundError: If no product has this ID.
        """

    @abstractmethod
    async def find_all(
        self,
        ctx: RequestContext,
        query: QueryExpression,
        skip: int,
        take: int,
    ) -> tuple[list[Product], int]:
        """Find a page of products matching a query.

        The count covers every match of the same predicate the items were
        drawn from, read from the same snapshot.

        Args:
            ctx: Request context.
            query: Compiled listing query.
            skip: Number of matches to skip.
            take: Maximum number of matches to return.

        Returns:
            Tuple of (products, total_count).
        """

    @abstractmethod
    async def store(self, ctx: RequestContext, product: Product) -> Product:
        """Insert a product, assigning its identifier.

        Args:
            ctx: Request context.
            product: Product to insert.

        Returns:
            Stored product carrying its new ID.
        """

    @abstractmethod
    async def update(self, ctx: RequestContext, product: Product) -> Product:
        """Replace the mutable fields of the product with ``product.id``.

        Args:
            ctx: Request context.
            product: Product carrying the ID and the new field values.

        Returns:
            Product as stored after the update.

        Raises:
            ProductNotFoundError: If no product has this ID.
        """

    @abstractmethod
    async def delete_by_id(self, ctx: RequestContext, product_id: ProductId) -> None:
        """Permanently remove a product.

        Args:
            ctx: Request context.
            product_id: Product ID.

        Raises:
            ProductNotFoundError: If no product has this ID.
        """


# ============================================================================
# In-Memory Repository
# ============================================================================


def matches(product: Product, query: QueryExpression) -> bool:
    """Evaluate every predicate of a query against a product."""
    for predicate in query.predicates:
        if isinstance(predicate, GeoRadius):
            if product.location is None:
                return False
            distance = predicate.origin.squared_degree_distance(product.location)
            if distance > predicate.radius_degrees**2:
                return False
        elif isinstance(predicate, KeywordMatch):
            needle = predicate.keyword.lower()
            haystacks = (getattr(product, name) or "" for name in predicate.fields)
            if not any(needle in text.lower() for text in haystacks):
                return False
    return True


def ordered(products: list[Product], query: QueryExpression) -> list[Product]:
    """Sort products as the query requests, ties broken by ID."""
    by_id = sorted(products, key=lambda p: str(p.id))
    if query.sort == SortOrder.DISTANCE_ASC and query.sort_origin is not None:
        origin = query.sort_origin
        return sorted(
            by_id,
            key=lambda p: origin.squared_degree_distance(p.location) if p.location else float("inf"),
        )
    return sorted(by_id, key=lambda p: p.created_at, reverse=True)


class InMemoryProductRepository(ProductRepository):
    """Dictionary-backed repository.

    Reference implementation of the contract, used by default and in
    tests. Stored products are copied in and out so callers can never
    mutate the store through a returned object.
    """

    def __init__(self) -> None:
        self._products: dict[ProductId, Product] = {}

    def __len__(self) -> int:
        return len(self._products)

    def _get(self, product_id: ProductId | None, operation: str) -> Product:
        product = self._products.get(product_id) if product_id is not None else None
        if product is None:
            raise ProductNotFoundError(str(product_id), operation)
        return product

    async def find(self, ctx: RequestContext, product_id: ProductId) -> Product:
        """Get a product by ID."""
        ctx.raise_if_expired("find", str(product_id))
        return replace(self._get(product_id, "find"))

    async def find_all(
        self,
        ctx: RequestContext,
        query: QueryExpression,
        skip: int,
        take: int,
    ) -> tuple[list[Product], int]:
        """Find a page of products matching a query."""
        ctx.raise_if_expired("find_all")
        found = ordered([p for p in self._products.values() if matches(p, query)], query)
        return [replace(p) for p in found[skip : skip + take]], len(found)

    async def store(self, ctx: RequestContext, product: Product) -> Product:
        """Insert a product under a fresh ID."""
        ctx.raise_if_expired("store")
        product_id = ProductId.generate()
        while product_id in self._products:
            product_id = ProductId.generate()
        stored = product.with_id(product_id)
        self._products[product_id] = stored
        return replace(stored)

    async def update(self, ctx: RequestContext, product: Product) -> Product:
        """Replace a product's mutable fields."""
        ctx.raise_if_expired("update", str(product.id))
        current = self._get(product.id, "update")
        updated = current.replaced_by(product)
        self._products[current.id] = updated
        return replace(updated)

    async def delete_by_id(self, ctx: RequestContext, product_id: ProductId) -> None:
        """Remove a product."""
        ctx.raise_if_expired("delete_by_id", str(product_id))
        self._get(product_id, "delete_by_id")
        del self._products[product_id]
