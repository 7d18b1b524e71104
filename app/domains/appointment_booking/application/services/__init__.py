# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Application services exports.
# ============================================================================
"""Appointment Booking Application Services."""

from .notification_dispatcher import NotificationDispatcher
from .slot_availability import (
    RACE_LOST_NOTICE,
    RESERVATION_ERROR_NOTICE,
    SLOT_UNAVAILABLE_NOTICE,
    SlotAvailabilityEngine,
)

__all__ = [
    "NotificationDispatcher",
    "RACE_LOST_NOTICE",
    "RESERVATION_ERROR_NOTICE",
    "SLOT_UNAVAILABLE_NOTICE",
    "SlotAvailabilityEngine",
]
