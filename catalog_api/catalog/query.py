"""Storage-agnostic listing queries.

QueryBuilder compiles a ProductFilter into a QueryExpression: a
conjunction of predicates plus a sort directive. Repositories translate
the expression into whatever their engine understands.
"""

from dataclasses import dataclass
from enum import Enum

from catalog_api.catalog.filters import ProductFilter
from catalog_api.domain.value_objects import KM_PER_DEGREE, GeoPoint

DEFAULT_SEARCH_RADIUS_KM = 10.0


class SortOrder(str, Enum):
    """Supported listing orders."""

    CREATED_DESC = "created_desc"
    DISTANCE_ASC = "distance_asc"


# ============================================================================
# Predicates
# ============================================================================


@dataclass(frozen=True)
class GeoRadius:
    """Products located within ``radius_km`` of ``origin``."""

    origin: GeoPoint
    radius_km: float

    @property
    def radius_degrees(self) -> float:
        """Radius as degrees of arc."""
        return self.radius_km / KM_PER_DEGREE


@dataclass(frozen=True)
class KeywordMatch:
    """Products whose name or description contains ``keyword``, ignoring case."""

    keyword: str
    fields: tuple[str, ...] = ("name", "description")


Predicate = GeoRadius | KeywordMatch


# ============================================================================
# Expression
# ============================================================================


@dataclass(frozen=True)
class QueryExpression:
    """Compiled listing query.

    Attributes:
        predicates: Conditions that must all hold (AND).
        sort: Result order.
        sort_origin: Reference point when sorting by distance.
    """

    predicates: tuple[Predicate, ...] = ()
    sort: SortOrder = SortOrder.CREATED_DESC
    sort_origin: GeoPoint | None = None

    @property
    def geo(self) -> GeoRadius | None:
        """The geo predicate, if any."""
        return next((p for p in self.predicates if isinstance(p, GeoRadius)), None)

    @property
    def keyword(self) -> KeywordMatch | None:
        """The keyword predicate, if any."""
        return next((p for p in self.predicates if isinstance(p, KeywordMatch)), None)


class QueryBuilder:
    """Builds QueryExpressions from normalized filters.

    Example usage:
        builder = QueryBuilder(search_radius_km=5)
        query = builder.build(normalize_filter(latitude="52.5", longitude="13.4"))
        query.sort  # SortOrder.DISTANCE_ASC
    """

    def __init__(self, search_radius_km: float = DEFAULT_SEARCH_RADIUS_KM) -> None:
        """Initialize builder.

        Args:
            search_radius_km: Radius of geo searches.
        """
        if search_radius_km <= 0:
            raise ValueError("search_radius_km must be positive")
        self.search_radius_km = search_radius_km

    def build(self, product_filter: ProductFilter) -> QueryExpression:
        """Compile a filter into a query expression.

        Args:
            product_filter: Normalized listing filter.

        Returns:
            Query expression for the repository.
        """
        predicates: list[Predicate] = []
        sort = SortOrder.CREATED_DESC
        origin = None

        if product_filter.location is not None:
            origin = product_filter.location
            predicates.append(GeoRadius(origin=origin, radius_km=self.search_radius_km))
            sort = SortOrder.DISTANCE_ASC

        if product_filter.keyword is not None:
            predicates.append(KeywordMatch(keyword=product_filter.keyword))

        return QueryExpression(
            predicates=tuple(predicates),
            sort=sort,
            sort_origin=origin,
        )
