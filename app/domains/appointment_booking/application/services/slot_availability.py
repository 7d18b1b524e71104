# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Slot generation and selection-time race resolution.
# ============================================================================
"""Slot Availability Engine.

Generates a provider's slots for a date and resolves selection races.

The authoritative availability check happens when the patient picks a slot,
not when the list is rendered: ``select`` calls the reservation port's
``check_and_reserve`` and, if another patient got there first, flips the
slot to unavailable in the displayed list and reports a non-fatal notice.
A lost race never results in a selection.
"""

import logging
from datetime import date
from typing import TYPE_CHECKING

from ...domain.entities.provider import Provider, weekday_abbreviation
from ...domain.entities.time_slot import SlotList, TimeSlot
from ...domain.services.slot_schedule import daily_hours, suggest_alternative_dates, upcoming_dates
from ..dto.booking_dtos import SlotListing, SlotSelectionResult, SlotSelectionStatus, UpcomingDateDTO

if TYPE_CHECKING:
    from ..ports.slot_reservation_port import ISlotReservation

logger = logging.getLogger(__name__)

RACE_LOST_NOTICE = "This slot was just booked by another patient. Please select a different time."
RESERVATION_ERROR_NOTICE = "We couldn't reserve this time slot. Please try again."
SLOT_UNAVAILABLE_NOTICE = "This time slot is not available. Please select a different time."


class SlotAvailabilityEngine:
    """Builds slot lists and reserves the slot a patient picks.

    Stateless apart from configuration: the currently held slot is owned by
    the caller and passed in on every selection.
    """

    def __init__(
        self,
        reservation: "ISlotReservation",
        start_hour: int = 9,
        end_hour: int = 16,
        lunch_hour: int | None = 12,
        suggestion_window_days: int = 14,
        max_suggestions: int = 3,
        upcoming_days: int = 7,
    ):
        """Initialize the engine.

        Args:
            reservation: Port providing occupancy and check-and-reserve.
            start_hour: First bookable hour (inclusive).
            end_hour: Last bookable hour (inclusive).
            lunch_hour: Hour skipped every day, or None.
            suggestion_window_days: Days scanned for alternative dates.
            max_suggestions: Maximum alternative dates returned.
            upcoming_days: Length of the date picker window.
        """
        self._reservation = reservation
        self._hours = daily_hours(start_hour, end_hour, lunch_hour)
        self._suggestion_window_days = suggestion_window_days
        self._max_suggestions = max_suggestions
        self._upcoming_days = upcoming_days

    @property
    def hours(self) -> list[int]:
        return list(self._hours)

    def upcoming_dates(self, provider: Provider, start: date) -> list[UpcomingDateDTO]:
        """Dates for the picker with the provider's weekday availability."""
        return [
            UpcomingDateDTO(
                date=day,
                day_name=weekday_abbreviation(day),
                provider_available=provider.is_available_on(day),
            )
            for day in upcoming_dates(start, self._upcoming_days)
        ]

    def suggest_alternatives(self, provider: Provider, day: date) -> list[date]:
        return suggest_alternative_dates(
            provider,
            day,
            window_days=self._suggestion_window_days,
            max_suggestions=self._max_suggestions,
        )

    async def load_slots(self, provider: Provider, day: date) -> SlotListing:
        """Generate the slot list for a (provider, date) pair.

        Args:
            provider: Selected provider.
            day: Date picked by the patient.

        Returns:
            SlotListing. When the provider does not work that weekday the
            list is empty and alternative dates are suggested.
        """
        if not provider.is_available_on(day):
            alternatives = self.suggest_alternatives(provider, day)
            logger.info(
                f"Provider {provider.id} unavailable on {day.isoformat()}, "
                f"suggesting {[d.isoformat() for d in alternatives]}"
            )
            return SlotListing(
                slot_list=SlotList(provider.id, day, provider_available=False),
                alternative_dates=alternatives,
            )

        fully_booked = await self._reservation.is_day_fully_booked(provider.id, day)
        slots: list[TimeSlot] = []
        for hour in self._hours:
            is_open = False if fully_booked else await self._reservation.is_slot_open(provider.id, day, hour)
            slots.append(TimeSlot(provider.id, day, hour, available=is_open))

        slot_list = SlotList(provider.id, day, slots)
        logger.info(
            f"Loaded {len(slot_list)} slots for provider {provider.id} on {day.isoformat()} "
            f"({len(slot_list.available_slots)} available)"
        )
        return SlotListing(slot_list=slot_list)

    async def select(
        self,
        slot_list: SlotList,
        slot_id: str,
        holder_id: str,
        held: TimeSlot | None = None,
    ) -> SlotSelectionResult:
        """Pick a slot, re-validating it at selection time.

        Picking the slot that is already held is stable and does not hit
        the reservation port again.

        On a lost race the slot is flipped to unavailable in ``slot_list``,
        the previously held slot (if any) is released, and the result
        carries the "slot just taken" notice. Other slots are untouched.

        Args:
            slot_list: List currently displayed to the patient.
            slot_id: Slot picked by the patient.
            holder_id: Identity of the draft making the reservation.
            held: Slot currently held by this draft, if any.

        Returns:
            SlotSelectionResult describing the outcome.
        """
        if held is not None and held.id == slot_id:
            return SlotSelectionResult(status=SlotSelectionStatus.ALREADY_HELD, slot=held)

        slot = slot_list.get(slot_id)
        if slot is None or not slot.available:
            logger.warning(f"Rejected selection of unavailable slot {slot_id}")
            return SlotSelectionResult(status=SlotSelectionStatus.UNAVAILABLE, notice=SLOT_UNAVAILABLE_NOTICE)

        try:
            reserved = await self._reservation.check_and_reserve(slot.provider_id, slot.date, slot.hour, holder_id)
        except Exception as e:
            logger.error(f"Reservation check failed for slot {slot_id}: {e}", exc_info=True)
            return SlotSelectionResult(status=SlotSelectionStatus.UNAVAILABLE, notice=RESERVATION_ERROR_NOTICE)

        if held is not None:
            await self.release(held, holder_id)

        if not reserved:
            slot_list.mark_unavailable(slot_id)
            logger.warning(f"Slot {slot_id} was taken before {holder_id} could reserve it")
            return SlotSelectionResult(status=SlotSelectionStatus.RACE_LOST, notice=RACE_LOST_NOTICE)

        logger.info(f"Slot {slot_id} reserved for {holder_id}")
        return SlotSelectionResult(status=SlotSelectionStatus.RESERVED, slot=slot)

    async def release(self, slot: TimeSlot, holder_id: str) -> None:
        """Give back a slot held by ``holder_id``."""
        try:
            await self._reservation.release(slot.provider_id, slot.date, slot.hour, holder_id)
        except Exception as e:
            logger.error(f"Failed to release slot {slot.id}: {e}", exc_info=True)
        else:
            logger.debug(f"Slot {slot.id} released by {holder_id}")
