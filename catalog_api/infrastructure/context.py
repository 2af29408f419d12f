"""Per-request context.

A RequestContext travels explicitly through every service and
repository call. It carries the correlation ID, a logger bound to it,
and an optional monotonic deadline.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Self

import structlog

from catalog_api.domain.exceptions import OperationCancelledError


@dataclass(frozen=True)
class RequestContext:
    """Correlation, logging and deadline for one unit of work.

    Attributes:
        request_id: Correlation ID, usually from ``X-Request-ID``.
        deadline: Absolute ``time.monotonic()`` value after which work
            must stop, or ``None`` for no deadline.
        logger: Logger bound with ``request_id``.
    """

    request_id: str | None = None
    deadline: float | None = None
    logger: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.logger is None:
            object.__setattr__(
                self,
                "logger",
                structlog.get_logger().bind(request_id=self.request_id),
            )

    @classmethod
    def create(
        cls,
        request_id: str | None = None,
        timeout_seconds: float | None = None,
    ) -> Self:
        """Create a context whose deadline starts now.

        Args:
            request_id: Correlation ID.
            timeout_seconds: Time budget; ``None`` or <= 0 means unlimited.

        Returns:
            New RequestContext.
        """
        deadline = None
        if timeout_seconds is not None and timeout_seconds > 0:
            deadline = time.monotonic() + timeout_seconds
        return cls(request_id=request_id, deadline=deadline)

    def remaining(self) -> float | None:
        """Seconds left before the deadline, ``None`` if unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return self.deadline is not None and time.monotonic() >= self.deadline

    def raise_if_expired(self, operation: str, product_id: str | None = None) -> None:
        """Abort before starting work once the deadline has passed.

        Raises:
            OperationCancelledError: If the deadline has passed.
        """
        if self.expired:
            raise OperationCancelledError(operation, product_id)

    def timeout(self) -> asyncio.Timeout:
        """Async context manager enforcing the remaining time budget."""
        return asyncio.timeout(self.remaining())
