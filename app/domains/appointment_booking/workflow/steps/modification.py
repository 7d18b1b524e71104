# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Edit or cancel a confirmed appointment.
# ============================================================================
"""Modification Handler.

Only the appointment type, reason and notification preferences can change
after confirmation. Doctor and time are read-only: changing them means
cancelling and booking again. Cancelling is a two-step action (request,
then confirm) and is terminal once confirmed.
"""

import logging
from typing import Any

from ...domain.entities.appointment_draft import AppointmentDraft, DraftUpdate
from ...domain.value_objects.appointment_type import AppointmentType
from ...domain.value_objects.notification_preferences import NotificationPreferences
from .base import BaseStep, UpdateRequester
from .slot_selection import REASON_REQUIRED_MESSAGE, TYPE_REQUIRED_MESSAGE

logger = logging.getLogger(__name__)

LOCKED_FIELDS_NOTICE = (
    "To change your doctor or appointment time, please cancel this appointment and book a new one."
)
CANCELLED_MESSAGE = "Your appointment has been cancelled successfully"


class ModificationHandler(BaseStep):
    """Edit form for the mutable subset of a confirmed draft."""

    EDITABLE_FIELDS = frozenset({"appointment_type", "reason", "notification_prefs"})

    def __init__(self, draft: AppointmentDraft, request_update: UpdateRequester | None = None) -> None:
        super().__init__(draft, request_update)
        self._appointment_type: AppointmentType | None = None
        self._reason = ""
        self._notification_prefs = NotificationPreferences()
        self._cancel_requested = False
        self._errors: dict[str, str] = {}

    async def enter(self) -> None:
        """Start from the draft's current values every time."""
        await super().enter()
        self._appointment_type = self.draft.appointment_type
        self._reason = self.draft.reason
        self._notification_prefs = self.draft.notification_prefs
        self._cancel_requested = False
        self._errors = {}

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    def set_appointment_type(self, appointment_type: AppointmentType) -> None:
        self._appointment_type = appointment_type

    def set_reason(self, reason: str) -> None:
        self._reason = reason

    def set_notification_prefs(self, email: bool | None = None, sms: bool | None = None) -> None:
        self._notification_prefs = NotificationPreferences(
            email=self._notification_prefs.email if email is None else email,
            sms=self._notification_prefs.sms if sms is None else sms,
        )

    def request_cancellation(self) -> None:
        """First step of the cancel action."""
        self._cancel_requested = True

    def abort_cancellation(self) -> None:
        """Keep the appointment."""
        self._cancel_requested = False

    def complete(self) -> DraftUpdate | None:
        """Validated mutable subset, or None (errors kept for the view)."""
        errors: dict[str, str] = {}
        if self._appointment_type is None:
            errors["appointment_type"] = TYPE_REQUIRED_MESSAGE
        if not self._reason.strip():
            errors["reason"] = REASON_REQUIRED_MESSAGE
        self._errors = errors
        if errors:
            return None
        return DraftUpdate(
            appointment_type=self._appointment_type,
            reason=self._reason.strip(),
            notification_prefs=self._notification_prefs,
        )

    def to_view(self) -> dict[str, Any]:
        draft = self.draft
        return {
            "step": self.step_name,
            "provider": draft.selected_provider.to_dict() if draft.selected_provider else None,
            "slot": draft.selected_slot.to_dict() if draft.selected_slot else None,
            "locked_fields_notice": LOCKED_FIELDS_NOTICE,
            "appointment_type": self._appointment_type.value if self._appointment_type else None,
            "appointment_types": AppointmentType.values(),
            "reason": self._reason,
            "notification_prefs": self._notification_prefs.to_dict(),
            "cancel_requested": self._cancel_requested,
            "errors": self.errors,
        }
