# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Application layer exports.
# ============================================================================
"""Application Layer - Appointment Booking.

Contains ports (interfaces), DTOs and services for the booking workflow.
"""

from .dto import (
    CurrentUser,
    SlotListing,
    SlotSelectionResult,
    SlotSelectionStatus,
    SubmissionResult,
    UpcomingDateDTO,
)
from .ports import (
    IAppointmentSubmitter,
    IIdentityProvider,
    INotificationService,
    IProviderDirectory,
    ISlotReservation,
)
from .services import NotificationDispatcher, SlotAvailabilityEngine

__all__ = [
    # Ports
    "IAppointmentSubmitter",
    "IIdentityProvider",
    "INotificationService",
    "IProviderDirectory",
    "ISlotReservation",
    # DTOs
    "CurrentUser",
    "SlotListing",
    "SlotSelectionResult",
    "SlotSelectionStatus",
    "SubmissionResult",
    "UpcomingDateDTO",
    # Services
    "NotificationDispatcher",
    "SlotAvailabilityEngine",
]
