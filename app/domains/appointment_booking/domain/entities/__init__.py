# Domain Entities
from .appointment_draft import MUTABLE_AFTER_CONFIRMATION, AppointmentDraft, DraftUpdate
from .provider import Department, Provider, parse_availability, weekday_abbreviation
from .time_slot import SlotList, TimeSlot, format_hour

__all__ = [
    "AppointmentDraft",
    "Department",
    "DraftUpdate",
    "MUTABLE_AFTER_CONFIRMATION",
    "Provider",
    "SlotList",
    "TimeSlot",
    "format_hour",
    "parse_availability",
    "weekday_abbreviation",
]
