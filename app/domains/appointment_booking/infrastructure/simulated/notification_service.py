# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: Notification service that logs instead of sending.
# ============================================================================
"""Logging Notification Service."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.entities.appointment_draft import AppointmentDraft
    from ...domain.value_objects.notification_preferences import NotificationPreferences

logger = logging.getLogger(__name__)


class LoggingNotificationService:
    """INotificationService that logs each message and keeps a record."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def notify(self, prefs: "NotificationPreferences", draft: "AppointmentDraft") -> None:
        patient = draft.patient_info
        slot = draft.selected_slot
        when = f"{slot.date.isoformat()} {slot.time}" if slot else "unscheduled"
        for channel in prefs.active_channels:
            destination = ""
            if patient is not None:
                destination = patient.email if channel.value == "email" else patient.phone
            logger.info(
                f"[{channel.value}] Appointment {draft.confirmation_id} on {when} -> {destination or 'unknown'}"
            )
            self.sent.append((channel.value, draft.id or ""))
