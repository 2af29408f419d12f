"""Product catalog core.

Filter normalization, query compilation, pagination and the
persistence contract with its in-memory and SQL implementations.
"""

from catalog_api.catalog.filters import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, ProductFilter, normalize_filter
from catalog_api.catalog.pagination import Page, PaginationMeta, offsets, paginate, total_pages
from catalog_api.catalog.query import (
    DEFAULT_SEARCH_RADIUS_KM,
    GeoRadius,
    KeywordMatch,
    QueryBuilder,
    QueryExpression,
    SortOrder,
)
from catalog_api.catalog.repository import InMemoryProductRepository, ProductRepository

__all__ = [
    # Filters
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "MAX_LIMIT",
    "ProductFilter",
    "normalize_filter",
    # Query
    "DEFAULT_SEARCH_RADIUS_KM",
    "GeoRadius",
    "KeywordMatch",
    "QueryBuilder",
    "QueryExpression",
    "SortOrder",
    # Pagination
    "Page",
    "PaginationMeta",
    "offsets",
    "paginate",
    "total_pages",
    # Repository
    "InMemoryProductRepository",
    "ProductRepository",
]
