# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Fire-and-forget delivery of appointment notifications.
# ============================================================================
"""Notification Dispatcher.

Schedules ``INotificationService.notify`` as a background task so the
workflow never waits on, or retries, notification delivery.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.entities.appointment_draft import AppointmentDraft
    from ..ports.notification_port import INotificationService

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Fire-and-forget wrapper around the notification port."""

    def __init__(self, service: "INotificationService | None" = None):
        self._service = service
        self._pending: set[asyncio.Task] = set()

    def dispatch(self, draft: "AppointmentDraft") -> asyncio.Task | None:
        """Send the draft over its active channels without blocking.

        Returns:
            The background task, or None when nothing needs to be sent.
        """
        prefs = draft.notification_prefs
        if self._service is None or not prefs.active_channels:
            logger.debug(f"No notification sent for draft {draft.id}")
            return None

        task = asyncio.create_task(self._send(prefs, draft))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send(self, prefs, draft: "AppointmentDraft") -> None:
        try:
            await self._service.notify(prefs, draft)
            channels = ", ".join(c.value for c in prefs.active_channels)
            logger.info(f"Notification sent for draft {draft.id} via {channels}")
        except Exception as e:
            logger.error(f"Notification failed for draft {draft.id}: {e}", exc_info=True)

    async def wait_pending(self) -> None:
        """Wait for in-flight notifications (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
