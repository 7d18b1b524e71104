# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Confirmation view for a booked appointment.
# ============================================================================
"""Confirmation Presenter.

Pure display of the confirmed draft with exactly two actions: ``modify()``
and ``done()``. A draft without provider or slot is a defect; the presenter
then shows a missing-data view with a way back to the dashboard instead of a
broken confirmation.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ...domain.entities.appointment_draft import AppointmentDraft
from ...domain.value_objects.notification_preferences import NotificationChannel
from .base import BaseStep

logger = logging.getLogger(__name__)

MISSING_DATA_TITLE = "Missing Appointment Information"
MISSING_DATA_MESSAGE = "There was an issue with your appointment details. Please try booking again."
SCHEDULED_MESSAGE = "Your appointment has been scheduled successfully."

Action = Callable[[], Awaitable[bool]]


class ConfirmationPresenter(BaseStep):
    """Render the confirmed appointment."""

    def __init__(
        self,
        draft: AppointmentDraft,
        on_modify: Action,
        on_done: Action,
    ) -> None:
        super().__init__(draft)
        self._on_modify = on_modify
        self._on_done = on_done

    @property
    def has_required_data(self) -> bool:
        return self.draft.selected_provider is not None and self.draft.selected_slot is not None

    @property
    def active_channels(self) -> list[NotificationChannel]:
        return self.draft.notification_prefs.active_channels

    @property
    def confirmation_message(self) -> str:
        destination = self.draft.notification_prefs.channel_description
        if not destination:
            return SCHEDULED_MESSAGE
        return f"{SCHEDULED_MESSAGE} We've sent a confirmation to your {destination}."

    async def modify(self) -> bool:
        """Enter modification. Not offered when data is missing."""
        if not self.has_required_data:
            logger.warning(f"Modify requested for incomplete draft {self.draft.id}")
            return False
        return await self._on_modify()

    async def done(self) -> bool:
        """Leave the workflow (return to dashboard)."""
        return await self._on_done()

    def to_view(self) -> dict[str, Any]:
        draft = self.draft
        if not self.has_required_data:
            logger.error(f"Confirmation rendered without provider or slot for draft {draft.id}")
            return {
                "step": self.step_name,
                "missing_data": True,
                "title": MISSING_DATA_TITLE,
                "message": MISSING_DATA_MESSAGE,
                "actions": ["done"],
            }

        provider = draft.selected_provider
        slot = draft.selected_slot
        patient = draft.patient_info
        return {
            "step": self.step_name,
            "missing_data": False,
            "confirmation_id": draft.confirmation_id,
            "message": self.confirmation_message,
            "patient": patient.to_dict() if patient else None,
            "provider": {"name": provider.name, "specialty": provider.specialty},
            "date": slot.date.isoformat(),
            "date_display": f"{slot.date:%A, %B} {slot.date.day}, {slot.date.year}",
            "time": slot.time,
            "appointment_type": draft.appointment_type.value if draft.appointment_type else None,
            "reason": draft.reason,
            "notifications": {
                "email": "Enabled" if draft.notification_prefs.email else "Disabled",
                "sms": "Enabled" if draft.notification_prefs.sms else "Disabled",
            },
            "active_channels": [c.value for c in self.active_channels],
            "actions": ["modify", "done"],
        }
