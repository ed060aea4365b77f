"""Base classes for the catalog domain layer.

Provides the entity, value and aggregate abstractions that catalog
objects (products, attributes, families, categories) are built on.

Subclasses are declared with ``@dataclass(eq=False)`` so the identity
based ``__eq__`` and ``__hash__`` below are inherited, not regenerated.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID, uuid4


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes.

    Example:
        @dataclass(frozen=True)
        class Metric(ValueObject):
            amount: Decimal
            unit: str
    """

    pass


# ============================================================================
# Entity Bases
# ============================================================================


IdT = TypeVar("IdT", bound=int | str | None)


@dataclass(eq=False)
class Entity(ABC, Generic[IdT]):
    """Catalog object identified by an id.

    Attributes:
        id: Identifier of the entity.
    """

    id: IdT

    def __eq__(self, other: object) -> bool:
        return isinstance(other, self.__class__) and self.id == other.id

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.id))


@dataclass(eq=False)
class CodedEntity(ABC):
    """Base class for entities identified by a unique code.

    Attributes, attribute groups, families and categories are looked up
    by code across the catalog, whatever database id they may carry.

    Attributes:
        code: Unique code of the entity.
    """

    code: str

    def __eq__(self, other: object) -> bool:
        """Compare entities by code.

        Args:
            other: Object to compare with.

        Returns:
            True if other is same type with same code.
        """
        if not isinstance(other, self.__class__):
            return False
        return self.code == other.code

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.code))

    def __str__(self) -> str:
        return self.code


# ============================================================================
# Aggregate Root Base
# ============================================================================


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False, kw_only=True)
class AggregateRoot(Entity[IdT], Generic[IdT]):
    """Entity owning other catalog objects and recording its changes.

    Every mutation goes through the aggregate, which bumps its version
    and queues a domain event describing the change. Callers drain the
    queue with collect_events().

    Attributes:
        version: Number of changes applied, starting at 1.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last change.
    """

    version: int = 1
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    _events: list["DomainEvent"] = field(default_factory=list, init=False, repr=False)

    def _record_event(self, event: "DomainEvent") -> None:
        self._events.append(event)

    def collect_events(self) -> list["DomainEvent"]:
        """Return the queued events and empty the queue."""
        events, self._events = self._events, []
        return events

    def _touch(self) -> None:
        """Mark a change: bump the version and the update timestamp."""
        self.updated_at = _utcnow()
        self.version += 1


# ============================================================================
# Domain Event Base
# ============================================================================


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Immutable record of a change made to an aggregate.

    Subclasses set ``event_type`` and add their own fields, returned by
    ``_payload``.

    Attributes:
        event_id: Unique identifier of the event.
        occurred_at: When the change happened.
        aggregate_id: Id of the changed aggregate.
        aggregate_type: Class name of the changed aggregate.
    """

    event_type: ClassVar[str]

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    aggregate_id: str = ""
    aggregate_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize the event, payload included.

        Returns:
            JSON-friendly dictionary.
        """
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "payload": self._payload(),
        }

    @abstractmethod
    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload data."""
