"""Simulated collaborators for the booking workflow.

In-memory implementations of the application ports, used by the HTTP app
and by tests. Randomized behavior is confined to this package.
"""

from .appointment_backend import UNAVAILABLE_REASON, SimulatedAppointmentBackend
from .identity_provider import InMemoryIdentityProvider, InMemoryUserDirectory
from .notification_service import LoggingNotificationService
from .provider_directory import InMemoryProviderDirectory
from .slot_reservation import OTHER_PATIENT, SimulatedSlotReservation

__all__ = [
    "InMemoryIdentityProvider",
    "InMemoryProviderDirectory",
    "InMemoryUserDirectory",
    "LoggingNotificationService",
    "OTHER_PATIENT",
    "SimulatedAppointmentBackend",
    "SimulatedSlotReservation",
    "UNAVAILABLE_REASON",
]
