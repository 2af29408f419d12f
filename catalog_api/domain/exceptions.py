"""Domain exceptions.

All domain-level errors raised by the catalog. Every failure that
reaches the API boundary is one of these kinds, so the adapter can map
it to a response without inspecting storage or validation internals.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Input Errors
# ============================================================================


class InvalidFilterError(DomainError):
    """Raised when listing parameters cannot form a valid filter.

    Covers partial geolocation, out-of-range coordinates and paging
    values that are not integers.
    """

    def __init__(self, parameter: str, reason: str, value: Any = None) -> None:
        """Initialize invalid filter error.

        Args:
            parameter: Name of the offending query parameter.
            reason: Explanation of why it was rejected.
            value: The raw value that was supplied.
        """
        super().__init__(
            f"Invalid filter parameter '{parameter}': {reason}",
            details={"parameter": parameter, "reason": reason, "value": value},
        )
        self.parameter = parameter


class ProductValidationError(DomainError):
    """Raised when a product payload fails validation."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        """Initialize product validation error.

        Args:
            errors: Field-level errors, each with ``field`` and ``message``.
        """
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(
            f"Product payload is invalid: {summary}",
            details={"errors": errors},
        )
        self.errors = errors


class MalformedIdentifierError(DomainError):
    """Raised when an identifier cannot be parsed into a product ID."""

    def __init__(self, value: str) -> None:
        """Initialize malformed identifier error.

        Args:
            value: The identifier as received.
        """
        super().__init__(
            f"Malformed product identifier: {value!r}",
            details={"product_id": value},
        )


# ============================================================================
# Repository Errors
# ============================================================================


class ProductNotFoundError(DomainError):
    """Raised when a referenced product does not exist."""

    def __init__(self, product_id: str, operation: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID of the missing product.
            operation: Repository operation that looked it up.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id, "operation": operation},
        )
        self.product_id = product_id
        self.operation = operation


class PersistenceError(DomainError):
    """Raised when the underlying storage operation fails."""

    def __init__(
        self,
        operation: str,
        reason: str,
        product_id: str | None = None,
        constraint_violation: bool = False,
    ) -> None:
        """Initialize persistence error.

        Args:
            operation: Repository operation that failed.
            reason: Description of the storage failure.
            product_id: Product the operation addressed, if any.
            constraint_violation: Whether the store rejected the data itself
                rather than failing to process it.
        """
        target = f" for product {product_id}" if product_id else ""
        super().__init__(
            f"Storage failure during {operation}{target}: {reason}",
            details={
                "operation": operation,
                "product_id": product_id,
                "reason": reason,
                "constraint_violation": constraint_violation,
            },
        )
        self.operation = operation
        self.product_id = product_id
        self.constraint_violation = constraint_violation


class OperationCancelledError(DomainError):
    """Raised when an operation is aborted because its deadline passed."""

    def __init__(self, operation: str, product_id: str | None = None) -> None:
        """Initialize operation cancelled error.

        Args:
            operation: Operation that was aborted.
            product_id: Product the operation addressed, if any.
        """
        super().__init__(
            f"Operation {operation} cancelled: deadline exceeded",
            details={"operation": operation, "product_id": product_id},
        )
        self.operation = operation
