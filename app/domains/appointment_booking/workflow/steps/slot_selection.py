# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Step 3 - pick a date and time slot and describe the visit.
# ============================================================================
"""Slot Selection Step.

Shows the provider's slots for the chosen date, reserves the slot the
patient picks through the availability engine, and collects the
appointment type, reason and notification preferences.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from typing import Any

from app.core.domain.exceptions import InvalidOperationException, ValidationException

from ...application.dto.booking_dtos import SlotListing, SlotSelectionResult, SlotSelectionStatus
from ...application.services.slot_availability import SlotAvailabilityEngine
from ...domain.entities.appointment_draft import AppointmentDraft, DraftUpdate
from ...domain.entities.provider import Provider
from ...domain.entities.time_slot import SlotList, TimeSlot
from ...domain.value_objects.appointment_type import AppointmentType
from ...domain.value_objects.notification_preferences import NotificationPreferences
from .base import BaseStep, UpdateRequester

logger = logging.getLogger(__name__)

SLOT_REQUIRED_MESSAGE = "Please select a time slot"
TYPE_REQUIRED_MESSAGE = "Please select an appointment type"
REASON_REQUIRED_MESSAGE = "Please provide a reason for your appointment"
SLOTS_LOAD_ERROR_MESSAGE = "Failed to load available time slots. Please try again."


class SlotSelectionStep(BaseStep):
    """Pick date, time slot and appointment details."""

    EDITABLE_FIELDS = frozenset({"selected_slot", "appointment_type", "reason", "notification_prefs"})

    def __init__(
        self,
        engine: SlotAvailabilityEngine,
        draft: AppointmentDraft,
        request_update: UpdateRequester | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(draft, request_update)
        self._engine = engine
        self._today = today

        self._provider: Provider | None = None
        self._selected_date: date | None = None
        self._listing: SlotListing | None = None
        self._pending: TimeSlot | None = None
        self._notice: str | None = None
        self._load_error: str | None = None

        self._appointment_type: AppointmentType | None = None
        self._reason = ""
        self._notification_prefs = NotificationPreferences()
        self._details_seeded = False

    # ---------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------

    async def enter(self) -> None:
        """Sync with the draft.

        A different provider than last time invalidates the list and any
        held slot. A slot already committed to the draft (for example after
        a failed submission) is kept as the pending selection.
        """
        await super().enter()
        provider = self.draft.selected_provider
        if provider != self._provider:
            await self.release_hold()
            self._provider = provider
            self._selected_date = None
            self._listing = None
            self._notice = None
            self._load_error = None

        committed = self.draft.selected_slot
        if self._pending is None and committed is not None and provider is not None:
            if committed.provider_id == provider.id:
                self._pending = committed

        if not self._details_seeded:
            self._appointment_type = self.draft.appointment_type
            self._reason = self.draft.reason
            self._notification_prefs = self.draft.notification_prefs
            self._details_seeded = True

    async def release_hold(self) -> None:
        """Release the slot currently held by this draft, if any."""
        if self._pending is not None:
            await self._engine.release(self._pending, self._holder_id)
            self._pending = None

    @property
    def _holder_id(self) -> str:
        return self.draft.id or ""

    # ---------------------------------------------------------------------
    # Date and slot selection
    # ---------------------------------------------------------------------

    @property
    def provider(self) -> Provider | None:
        return self._provider

    @property
    def selected_date(self) -> date | None:
        return self._selected_date

    @property
    def listing(self) -> SlotListing | None:
        return self._listing

    @property
    def pending_slot(self) -> TimeSlot | None:
        return self._pending

    @property
    def notice(self) -> str | None:
        return self._notice

    @property
    def load_error(self) -> str | None:
        return self._load_error

    def upcoming_dates(self) -> list[dict[str, Any]]:
        if self._provider is None:
            return []
        return [d.to_dict() for d in self._engine.upcoming_dates(self._provider, self._today())]

    async def select_date(self, day: date) -> SlotListing | None:
        """Load the slots for ``day``.

        Changing the date drops the pending slot and releases its hold.
        Reloading the same date keeps the hold, and the held slot is shown
        as available to this patient.

        Raises:
            InvalidOperationException: If no provider has been committed.
            ValidationException: If ``day`` is in the past.
        """
        if self._provider is None:
            raise InvalidOperationException("select_date", self.step_name, "Select a doctor first")
        if day < self._today():
            raise ValidationException("Appointment date cannot be in the past", field="date")

        if day != self._selected_date:
            await self.release_hold()
        self._selected_date = day
        self._notice = None

        try:
            self._listing = await self._engine.load_slots(self._provider, day)
        except Exception as e:
            logger.error(f"Error loading slots for {self._provider.id} on {day.isoformat()}: {e}", exc_info=True)
            self._listing = None
            self._load_error = SLOTS_LOAD_ERROR_MESSAGE
            return None

        self._load_error = None
        if self._pending is not None:
            self._listing = self._with_held_slot(self._listing, self._pending)
        return self._listing

    @staticmethod
    def _with_held_slot(listing: SlotListing, held: TimeSlot) -> SlotListing:
        slot_list = listing.slot_list
        current = slot_list.get(held.id)
        if current is None or current.available:
            return listing
        slots = [
            TimeSlot(slot.provider_id, slot.date, slot.hour, available=True) if slot.id == held.id else slot
            for slot in slot_list
        ]
        return replace(
            listing,
            slot_list=SlotList(slot_list.provider_id, slot_list.date, slots, slot_list.provider_available),
        )

    async def select_slot(self, slot_id: str) -> SlotSelectionResult:
        """Pick a slot from the displayed list.

        A lost race clears the pending selection and sets the notice. The
        rest of the list stays selectable.

        Raises:
            InvalidOperationException: If no slot list is displayed.
        """
        if self._listing is None:
            raise InvalidOperationException("select_slot", self.step_name, "Select a date first")

        result = await self._engine.select(
            self._listing.slot_list,
            slot_id,
            holder_id=self._holder_id,
            held=self._pending,
        )

        if result.selected:
            self._pending = result.slot
            self._notice = None
        elif result.status == SlotSelectionStatus.RACE_LOST:
            self._pending = None
            self._notice = result.notice
        else:
            self._notice = result.notice
        return result

    # ---------------------------------------------------------------------
    # Appointment details
    # ---------------------------------------------------------------------

    @property
    def appointment_type(self) -> AppointmentType | None:
        return self._appointment_type

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def notification_prefs(self) -> NotificationPreferences:
        return self._notification_prefs

    def set_appointment_type(self, appointment_type: AppointmentType | None) -> None:
        self._appointment_type = appointment_type

    def set_reason(self, reason: str) -> None:
        self._reason = reason

    def set_notification_prefs(self, email: bool | None = None, sms: bool | None = None) -> None:
        self._notification_prefs = NotificationPreferences(
            email=self._notification_prefs.email if email is None else email,
            sms=self._notification_prefs.sms if sms is None else sms,
        )

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if self._pending is None:
            errors["slot"] = SLOT_REQUIRED_MESSAGE
        if self._appointment_type is None:
            errors["appointment_type"] = TYPE_REQUIRED_MESSAGE
        if not self._reason.strip():
            errors["reason"] = REASON_REQUIRED_MESSAGE
        return errors

    def complete(self) -> DraftUpdate | None:
        if self.validate():
            return None
        return DraftUpdate(
            selected_slot=self._pending,
            appointment_type=self._appointment_type,
            reason=self._reason.strip(),
            notification_prefs=self._notification_prefs,
        )

    def to_view(self) -> dict[str, Any]:
        listing = self._listing
        return {
            "step": self.step_name,
            "provider": self._provider.to_dict() if self._provider else None,
            "upcoming_dates": self.upcoming_dates(),
            "selected_date": self._selected_date.isoformat() if self._selected_date else None,
            "slots": listing.slot_list.to_dict() if listing else None,
            "provider_unavailable": listing.provider_unavailable if listing else False,
            "alternative_dates": [d.isoformat() for d in listing.alternative_dates] if listing else [],
            "pending_slot_id": self._pending.id if self._pending else None,
            "notice": self._notice,
            "load_error": self._load_error,
            "appointment_type": self._appointment_type.value if self._appointment_type else None,
            "appointment_types": AppointmentType.values(),
            "reason": self._reason,
            "notification_prefs": self._notification_prefs.to_dict(),
            "errors": self.validate(),
            "can_advance": not self.validate(),
        }
