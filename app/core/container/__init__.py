# ============================================================================
# SCOPE: GLOBAL
# Description: Main dependency injection container (singleton).
#              Composes the base singletons and the booking domain container.
# ============================================================================
"""
Dependency Injection Container.

Centralized container for creating and managing application dependencies.
Wires the simulated collaborators to the booking workflow ports.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .appointment_booking import AppointmentBookingContainer
from .base import BaseContainer

if TYPE_CHECKING:
    from app.domains.appointment_booking.infrastructure import BookingSessionStore
    from app.domains.appointment_booking.infrastructure.simulated import InMemoryUserDirectory
    from app.domains.appointment_booking.workflow import BookingController, WorkflowConfig

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(self, config: dict | None = None):
        """
        Initialize container with all domain sub-containers.

        Args:
            config: Optional configuration dict (overrides settings)
        """
        self._base = BaseContainer(config)
        self._booking = AppointmentBookingContainer(self._base)

        logger.info("DependencyContainer initialized")

    @property
    def settings(self):
        return self._base.settings

    @property
    def config(self):
        return self._base.config

    # ============================================================
    # SINGLETONS (delegated to BaseContainer)
    # ============================================================

    def get_provider_directory(self):
        return self._base.get_provider_directory()

    def get_slot_reservation(self):
        return self._base.get_slot_reservation()

    def get_appointment_backend(self):
        return self._base.get_appointment_backend()

    def get_notification_service(self):
        return self._base.get_notification_service()

    def get_user_directory(self) -> InMemoryUserDirectory:
        return self._base.get_user_directory()

    def get_session_store(self) -> BookingSessionStore:
        """Get booking session store (singleton)."""
        return self._base.get_session_store()

    def get_config(self) -> dict:
        """Get current configuration."""
        return self._base.get_config()

    # ============================================================
    # APPOINTMENT BOOKING (delegated to AppointmentBookingContainer)
    # ============================================================

    def get_workflow_config(self) -> WorkflowConfig:
        return self._booking.get_workflow_config()

    def create_booking_controller(self, identity, draft=None) -> BookingController:
        return self._booking.create_controller(identity, draft)

    def create_booking_controller_for_token(self, token: str | None) -> BookingController:
        return self._booking.create_controller_for_token(token)


# ============================================================
# GLOBAL CONTAINER INSTANCE
# ============================================================

_container: DependencyContainer | None = None


def get_container(config: dict | None = None) -> DependencyContainer:
    """
    Get global container instance (singleton).

    Args:
        config: Optional configuration (only used on first call)

    Returns:
        DependencyContainer instance
    """
    global _container

    if _container is None:
        logger.info("Initializing global DependencyContainer")
        _container = DependencyContainer(config)
    elif config is not None:
        logger.warning(
            "Container already initialized, ignoring new config. "
            "Call reset_container() first to change config."
        )

    return _container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or reconfiguration.
    """
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None


__all__ = [
    "DependencyContainer",
    "get_container",
    "reset_container",
    "BaseContainer",
    "AppointmentBookingContainer",
]
