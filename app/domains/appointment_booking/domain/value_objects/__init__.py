# Domain Value Objects
from .appointment_type import AppointmentType
from .booking_state import BookingState, ExitReason
from .draft_status import DraftStatus
from .notification_preferences import NotificationChannel, NotificationPreferences
from .patient_info import PatientInfo

__all__ = [
    "AppointmentType",
    "BookingState",
    "DraftStatus",
    "ExitReason",
    "NotificationChannel",
    "NotificationPreferences",
    "PatientInfo",
]
