"""Pagination arithmetic.

Pages are never clamped to the available total: asking for a page past
the end returns no items together with accurate totals, so any page
value can be requested repeatedly with the same outcome.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PaginationMeta:
    """Page descriptor returned alongside a listing.

    Attributes:
        page: Requested page (1-indexed).
        limit: Items per page.
        total_items: Items matching the query across all pages.
        total_pages: Number of non-empty pages.
    """

    page: int
    limit: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


@dataclass(frozen=True)
class Page:
    """Offsets for the repository plus the resulting metadata."""

    skip: int
    take: int
    meta: PaginationMeta


def offsets(page: int, limit: int) -> tuple[int, int]:
    """Calculate (skip, take) for a page.

    Args:
        page: Page number, at least 1.
        limit: Items per page, at least 1.

    Returns:
        Number of items to skip and to take.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    return (page - 1) * limit, limit


def total_pages(total_items: int, limit: int) -> int:
    """Ceiling of total_items / limit, 0 for an empty result."""
    if total_items < 0:
        raise ValueError(f"total_items must be >= 0, got {total_items}")
    return -(-total_items // limit)


def paginate(page: int, limit: int, total_items: int) -> Page:
    """Calculate offsets and metadata for a page.

    Args:
        page: Page number, at least 1.
        limit: Items per page, at least 1.
        total_items: Total matching items.

    Returns:
        Page with skip/take and metadata.
    """
    skip, take = offsets(page, limit)
    return Page(
        skip=skip,
        take=take,
        meta=PaginationMeta(
            page=page,
            limit=limit,
            total_items=total_items,
            total_pages=total_pages(total_items, limit),
        ),
    )
