# ============================================================================
# SCOPE: GLOBAL
# Description: Base container with shared singletons (simulated collaborators,
#              random source, session store). Created once per process.
# ============================================================================
"""
Base Container - Shared Singletons.

Single Responsibility: Create and cache the collaborators every booking
workflow shares.
"""

import logging
import random

from app.config.settings import get_settings
from app.domains.appointment_booking.infrastructure import BookingSessionStore
from app.domains.appointment_booking.infrastructure.simulated import (
    InMemoryProviderDirectory,
    InMemoryUserDirectory,
    LoggingNotificationService,
    SimulatedAppointmentBackend,
    SimulatedSlotReservation,
)

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache shared resources.
    """

    def __init__(self, config: dict | None = None):
        """
        Initialize base container.

        Args:
            config: Optional configuration dict (overrides settings)
        """
        self.settings = get_settings()
        self.config = config or {}

        seed = self.config.get("random_seed", self.settings.BOOKING_RANDOM_SEED)
        self.rng = random.Random(seed)

        # Singletons
        self._provider_directory: InMemoryProviderDirectory | None = None
        self._slot_reservation: SimulatedSlotReservation | None = None
        self._appointment_backend: SimulatedAppointmentBackend | None = None
        self._notification_service: LoggingNotificationService | None = None
        self._user_directory: InMemoryUserDirectory | None = None
        self._session_store: BookingSessionStore | None = None

        logger.info(f"BaseContainer initialized (seed={seed})")

    def _setting(self, key: str, attr: str):
        return self.config.get(key, getattr(self.settings, attr))

    def get_provider_directory(self) -> InMemoryProviderDirectory:
        if self._provider_directory is None:
            self._provider_directory = InMemoryProviderDirectory()
        return self._provider_directory

    def get_slot_reservation(self) -> SimulatedSlotReservation:
        """Get the shared slot reservation ledger (singleton)."""
        if self._slot_reservation is None:
            self._slot_reservation = SimulatedSlotReservation(
                availability_rate=self._setting("availability_rate", "BOOKING_SLOT_AVAILABILITY_RATE"),
                race_loss_rate=self._setting("race_loss_rate", "BOOKING_RACE_LOSS_RATE"),
                fully_booked_rate=self._setting("fully_booked_rate", "BOOKING_FULLY_BOOKED_RATE"),
                rng=self.rng,
            )
        return self._slot_reservation

    def get_appointment_backend(self) -> SimulatedAppointmentBackend:
        if self._appointment_backend is None:
            self._appointment_backend = SimulatedAppointmentBackend(
                success_rate=self._setting("success_rate", "BOOKING_SUBMISSION_SUCCESS_RATE"),
                rng=self.rng,
            )
        return self._appointment_backend

    def get_notification_service(self) -> LoggingNotificationService:
        if self._notification_service is None:
            self._notification_service = LoggingNotificationService()
        return self._notification_service

    def get_user_directory(self) -> InMemoryUserDirectory:
        if self._user_directory is None:
            self._user_directory = InMemoryUserDirectory()
        return self._user_directory

    def get_session_store(self) -> BookingSessionStore:
        """Get the booking session store (singleton)."""
        if self._session_store is None:
            self._session_store = BookingSessionStore(
                ttl_seconds=self._setting("session_ttl_seconds", "BOOKING_SESSION_TTL_SECONDS"),
            )
        return self._session_store

    def get_config(self) -> dict:
        """Get current configuration."""
        return {
            "environment": self.settings.ENVIRONMENT,
            "simulation": self.settings.simulation_config,
            **self.config,
        }
