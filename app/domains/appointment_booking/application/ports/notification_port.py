# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Notification port.
# ============================================================================
"""Notification Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.appointment_draft import AppointmentDraft
    from ...domain.value_objects.notification_preferences import NotificationPreferences


@runtime_checkable
class INotificationService(Protocol):
    """Interface for sending appointment notifications.

    Implementations: LoggingNotificationService

    Callers fire and forget: the result is not awaited by the workflow
    and failures are never retried.
    """

    async def notify(self, prefs: "NotificationPreferences", draft: "AppointmentDraft") -> None:
        """Send the appointment details over the enabled channels.

        Args:
            prefs: Channels chosen by the patient.
            draft: Confirmed draft.
        """
        ...
