# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: Simulated booking backend.
# ============================================================================
"""Simulated Appointment Backend.

Implements IAppointmentSubmitter in memory. Submissions succeed with
probability ``success_rate`` and are stored under a generated
confirmation id.
"""

import logging
import random
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ...application.dto.booking_dtos import SubmissionResult

if TYPE_CHECKING:
    from ...domain.entities.appointment_draft import AppointmentDraft

logger = logging.getLogger(__name__)

UNAVAILABLE_REASON = "Failed to save appointment. The system is currently unavailable. Please try again."


class SimulatedAppointmentBackend:
    """Booking backend with a configurable failure rate."""

    def __init__(self, success_rate: float = 0.9, rng: random.Random | None = None):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be between 0 and 1, got {success_rate}")
        self._success_rate = success_rate
        self._rng = rng or random.Random()
        self._appointments: dict[str, dict[str, Any]] = {}
        self._calls = 0

    @property
    def calls(self) -> int:
        """Number of submissions received, successful or not."""
        return self._calls

    def get(self, confirmation_id: str) -> dict[str, Any] | None:
        return self._appointments.get(confirmation_id)

    def _new_confirmation_id(self) -> str:
        suffix = "".join(self._rng.choices("0123456789ABCDEF", k=8))
        return f"APT-{datetime.now(UTC):%Y%m%d}-{suffix}"

    async def submit_appointment(self, draft: "AppointmentDraft") -> SubmissionResult:
        self._calls += 1
        if self._rng.random() >= self._success_rate:
            logger.warning(f"Simulated backend rejected draft {draft.id}")
            return SubmissionResult.failed(UNAVAILABLE_REASON)

        confirmation_id = self._new_confirmation_id()
        self._appointments[confirmation_id] = draft.to_summary_dict()
        logger.info(f"Simulated backend stored draft {draft.id} as {confirmation_id}")
        return SubmissionResult.ok(confirmation_id)
