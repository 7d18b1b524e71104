"""Time Slot Entities.

Bookable hours for a (provider, date) pair. Slots are a projection of the
provider's schedule and are never persisted.
"""

from collections.abc import Iterable
from datetime import date
from typing import Any


def format_hour(hour: int) -> str:
    """Display time for a whole hour, e.g. 10 -> "10:00 AM", 13 -> "1:00 PM"."""
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:00 {suffix}"


class TimeSlot:
    """One bookable hour.

    Availability is one-way: a slot can be marked unavailable but there is
    no operation that makes it available again.
    """

    __slots__ = ("provider_id", "date", "hour", "_available")

    def __init__(self, provider_id: str, date: date, hour: int, available: bool = True):
        self.provider_id = provider_id
        self.date = date
        self.hour = hour
        self._available = available

    @property
    def id(self) -> str:
        """Unique per provider, date and hour."""
        return f"{self.provider_id}-{self.date.isoformat()}-{self.hour:02d}"

    @property
    def time(self) -> str:
        return format_hour(self.hour)

    @property
    def available(self) -> bool:
        return self._available

    def mark_unavailable(self) -> None:
        self._available = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"TimeSlot(id={self.id!r}, time={self.time!r}, available={self._available})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "time": self.time,
            "available": self._available,
        }


class SlotList:
    """Slots displayed for one (provider, date) pair.

    Once a slot in this list is unavailable it stays unavailable for the
    lifetime of the instance. Picking another date produces a new list.
    """

    def __init__(
        self,
        provider_id: str,
        date: date,
        slots: Iterable[TimeSlot] = (),
        provider_available: bool = True,
    ):
        self.provider_id = provider_id
        self.date = date
        self.provider_available = provider_available
        self._slots: dict[str, TimeSlot] = {slot.id: slot for slot in slots}

    @property
    def slots(self) -> list[TimeSlot]:
        return list(self._slots.values())

    @property
    def available_slots(self) -> list[TimeSlot]:
        return [slot for slot in self._slots.values() if slot.available]

    @property
    def is_empty(self) -> bool:
        return not self._slots

    @property
    def all_booked(self) -> bool:
        """Slots exist but none can be picked."""
        return bool(self._slots) and not self.available_slots

    def get(self, slot_id: str) -> TimeSlot | None:
        return self._slots.get(slot_id)

    def mark_unavailable(self, slot_id: str) -> bool:
        """Flip one slot to unavailable, leaving the rest untouched.

        Returns:
            True if the slot exists in this list.
        """
        slot = self._slots.get(slot_id)
        if slot is None:
            return False
        slot.mark_unavailable()
        return True

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self):
        return iter(self._slots.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_id": self.provider_id,
            "date": self.date.isoformat(),
            "provider_available": self.provider_available,
            "all_booked": self.all_booked,
            "slots": [slot.to_dict() for slot in self._slots.values()],
        }
