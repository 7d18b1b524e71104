"""Domain events recorded by the appointment draft."""

from dataclasses import dataclass

from app.core.domain.events import DomainEvent


@dataclass(frozen=True)
class AppointmentConfirmed(DomainEvent):
    draft_id: str = ""
    confirmation_id: str = ""
    provider_id: str = ""
    slot_id: str = ""


@dataclass(frozen=True)
class AppointmentModified(DomainEvent):
    draft_id: str = ""
    confirmation_id: str = ""
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class AppointmentCancelled(DomainEvent):
    draft_id: str = ""
    confirmation_id: str = ""
    provider_id: str = ""
    slot_id: str = ""
