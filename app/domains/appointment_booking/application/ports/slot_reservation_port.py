# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Slot occupancy and reservation port.
# ============================================================================
"""Slot Reservation Port.

Authoritative occupancy checks for (provider, date, hour). A real backend
implements ``check_and_reserve`` as an atomic conditional write keyed by
provider+date+hour, which guarantees at most one committed booking per slot.
"""

from datetime import date
from typing import Protocol, runtime_checkable


@runtime_checkable
class ISlotReservation(Protocol):
    """Interface for slot occupancy and reservation.

    Implementations: SimulatedSlotReservation
    """

    async def is_day_fully_booked(self, provider_id: str, day: date) -> bool:
        """Is every slot of the provider's day already taken?"""
        ...

    async def is_slot_open(self, provider_id: str, day: date, hour: int) -> bool:
        """Occupancy snapshot used when the slot list is rendered."""
        ...

    async def check_and_reserve(self, provider_id: str, day: date, hour: int, holder_id: str) -> bool:
        """Re-check the slot and reserve it for ``holder_id`` in one step.

        Returns:
            True if the slot is now held by ``holder_id``. False if another
            holder got it first.
        """
        ...

    async def release(self, provider_id: str, day: date, hour: int, holder_id: str) -> None:
        """Release a reservation held by ``holder_id``. No-op if not held."""
        ...
