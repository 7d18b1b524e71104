# ============================================================================
# SCOPE: DOMAIN
# Description: Container for Appointment Booking domain dependencies.
#              Builds one BookingController per booking session.
# ============================================================================
"""
Appointment Booking Domain Container.

Wires the workflow controller to the shared collaborators held by the
base container.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domains.appointment_booking.workflow import BookingController, WorkflowConfig

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer
    from app.domains.appointment_booking.application.ports import IIdentityProvider
    from app.domains.appointment_booking.domain.entities import AppointmentDraft

logger = logging.getLogger(__name__)


class AppointmentBookingContainer:
    """Container for Appointment Booking domain dependencies.

    Single Responsibility: Wire booking workflow dependencies.
    """

    def __init__(self, base: "BaseContainer"):
        """Initialize container.

        Args:
            base: Base container with shared singletons.
        """
        self._base = base
        self._workflow_config: WorkflowConfig | None = None
        logger.debug("AppointmentBookingContainer initialized")

    def get_workflow_config(self) -> WorkflowConfig:
        """Workflow configuration derived from settings, overridable via config dict."""
        if self._workflow_config is None:
            config = WorkflowConfig.from_settings(self._base.settings)
            overrides = self._base.config.get("workflow")
            if overrides:
                config = WorkflowConfig.from_dict({**config.to_dict(), **overrides})
            self._workflow_config = config
        return self._workflow_config

    def create_controller(
        self,
        identity: "IIdentityProvider",
        draft: "AppointmentDraft | None" = None,
    ) -> BookingController:
        """Create a booking controller for one session.

        Args:
            identity: Identity port for the requesting user.
            draft: Existing draft to resume, or None to start fresh.

        Returns:
            BookingController bound to the shared collaborators.
        """
        return BookingController(
            identity=identity,
            directory=self._base.get_provider_directory(),
            reservation=self._base.get_slot_reservation(),
            submitter=self._base.get_appointment_backend(),
            notifier=self._base.get_notification_service(),
            draft=draft,
            config=self.get_workflow_config(),
        )

    def create_controller_for_token(self, token: str | None) -> BookingController:
        """Create a controller whose identity is resolved from a bearer token."""
        identity = self._base.get_user_directory().identity_for(token)
        return self.create_controller(identity)
