"""Base classes for domain layer.

Provides foundational abstractions for entities and value objects.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. They have no lifecycle and are interchangeable
    when their values are equal.

    Example:
        @dataclass(frozen=True)
        class GeoPoint(ValueObject):
            latitude: float
            longitude: float
    """

    pass


# ============================================================================
# Entity Base
# ============================================================================


T = TypeVar("T")


@dataclass
class Entity(ABC, Generic[T]):
    """Base class for entities.

    Entities have identity that persists across state changes.
    Subclasses declared with ``@dataclass`` get field-wise equality;
    use ``same_identity`` to compare by identity alone.

    Attributes:
        id: Unique identifier for this entity, ``None`` until persisted.
    """

    id: T

    def same_identity(self, other: object) -> bool:
        """Compare entities by identity.

        Args:
            other: Object to compare with.

        Returns:
            True if other is same type with the same, assigned id.
        """
        if not isinstance(other, self.__class__):
            return False
        return self.id is not None and self.id == other.id

    @property
    def is_persisted(self) -> bool:
        """Whether the store has assigned an identifier."""
        return self.id is not None
