# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Appointment submission port.
# ============================================================================
"""Appointment Submitter Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.appointment_draft import AppointmentDraft
    from ..dto.booking_dtos import SubmissionResult


@runtime_checkable
class IAppointmentSubmitter(Protocol):
    """Interface to the booking persistence backend.

    Implementations: SimulatedAppointmentBackend
    """

    async def submit_appointment(self, draft: "AppointmentDraft") -> "SubmissionResult":
        """Turn a complete draft into a confirmed appointment.

        Either the whole draft is booked or nothing is.

        Args:
            draft: Draft ready for submission.

        Returns:
            SubmissionResult with a confirmation id, or a failure reason.
        """
        ...
