"""
Base Domain Event

Aggregates record events when something the rest of the system reacts to
happens (an appointment confirmed, modified or cancelled). The workflow
drains them after each action.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Immutable record of a domain occurrence.

    Subclasses add their payload as frozen dataclass fields with defaults.
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        return self.__class__.__name__
