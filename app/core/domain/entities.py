"""
Base Entity Classes

Entities have an identity that survives attribute changes. Aggregate roots
additionally carry a version and the events recorded since they were last
drained.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import uuid4

TId = TypeVar("TId")


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for domain entities.

    Type Parameters:
        TId: Type of entity identifier
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __eq__(self, other: object) -> bool:
        """Equal when both have the same, assigned ID."""
        if not isinstance(other, Entity):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC)


@dataclass(eq=False)
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Entry point of an aggregate.

    ``version`` is bumped on every structural change, so callers can tell
    whether the aggregate changed since they last looked at it.
    """

    _domain_events: list[Any] = field(default_factory=list, repr=False, compare=False)
    version: int = field(default=0)

    def _record_event(self, event: Any) -> None:
        self._domain_events.append(event)

    def pull_domain_events(self) -> list[Any]:
        """Return recorded domain events and clear them."""
        events = list(self._domain_events)
        self._domain_events.clear()
        return events

    def increment_version(self) -> None:
        self.version += 1
        self.touch()


def generate_uuid_str() -> str:
    return str(uuid4())
