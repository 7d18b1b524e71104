# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Ports (interfaces) for external collaborators.
# ============================================================================
"""Appointment Booking Application Ports.

Interface definitions (ports) for the collaborators the workflow depends on:

- IIdentityProvider: authenticated actor
- IProviderDirectory: doctors and departments
- ISlotReservation: slot occupancy and atomic check-and-reserve
- IAppointmentSubmitter: booking persistence
- INotificationService: confirmation notifications
"""

from .appointment_submitter_port import IAppointmentSubmitter
from .identity_port import IIdentityProvider
from .notification_port import INotificationService
from .provider_directory_port import IProviderDirectory
from .slot_reservation_port import ISlotReservation

__all__ = [
    "IAppointmentSubmitter",
    "IIdentityProvider",
    "INotificationService",
    "IProviderDirectory",
    "ISlotReservation",
]
