# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: DTO exports.
# ============================================================================
"""Appointment Booking DTOs."""

from .booking_dtos import (
    CurrentUser,
    SlotListing,
    SlotSelectionResult,
    SlotSelectionStatus,
    SubmissionResult,
    UpcomingDateDTO,
)

__all__ = [
    # Identity
    "CurrentUser",
    # Submission
    "SubmissionResult",
    # Slots
    "SlotListing",
    "SlotSelectionResult",
    "SlotSelectionStatus",
    "UpcomingDateDTO",
]
