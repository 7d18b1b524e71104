# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Step 1 - verify the acting patient and collect contact details.
# ============================================================================
"""Identity Verification Step.

Confirms that the actor is an authenticated patient and seeds the draft's
patient info from their profile. A failed verification is terminal for the
step: the caller has to re-authenticate and start a new workflow.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from app.core.domain.exceptions import InvalidOperationException

from ...domain.entities.appointment_draft import AppointmentDraft, DraftUpdate
from ...domain.value_objects.patient_info import PatientInfo
from .base import BaseStep, UpdateRequester

if TYPE_CHECKING:
    from ...application.ports.identity_port import IIdentityProvider

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = "You must be logged in to book an appointment."
NOT_VERIFIED_MESSAGE = "Patient information could not be verified. Please contact support."
VERIFICATION_ERROR_MESSAGE = "An error occurred during verification. Please try again later."


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"


class IdentityVerificationStep(BaseStep):
    """Verify the patient and validate the six required fields."""

    EDITABLE_FIELDS = frozenset({"patient_info"})

    def __init__(
        self,
        identity: "IIdentityProvider",
        draft: AppointmentDraft,
        request_update: UpdateRequester | None = None,
    ) -> None:
        super().__init__(draft, request_update)
        self._identity = identity
        self._status = VerificationStatus.PENDING
        self._failure_message: str | None = None
        self._form = PatientInfo()
        self._errors: dict[str, str] = {}

    @property
    def status(self) -> VerificationStatus:
        return self._status

    @property
    def failure_message(self) -> str | None:
        return self._failure_message

    @property
    def form(self) -> PatientInfo:
        return self._form

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def is_valid(self) -> bool:
        return self._status == VerificationStatus.VERIFIED and not self._errors

    async def enter(self) -> None:
        await super().enter()
        if self._status == VerificationStatus.PENDING:
            await self.verify()
        elif self._status == VerificationStatus.VERIFIED and self.draft.patient_info is not None:
            self._set_form(self.draft.patient_info)

    async def verify(self) -> VerificationStatus:
        """Check the session and prefill the form.

        Details already in the draft win over the profile, so coming back to
        this step never overwrites what the patient typed.

        Returns:
            Resulting verification status.
        """
        if self._status != VerificationStatus.PENDING:
            return self._status

        try:
            if not await self._identity.is_authenticated():
                return self._fail(NOT_AUTHENTICATED_MESSAGE)

            user = await self._identity.get_current_user()
            if user is None or not user.is_patient:
                return self._fail(NOT_VERIFIED_MESSAGE)
        except Exception as e:
            logger.error(f"Identity verification failed: {e}", exc_info=True)
            return self._fail(VERIFICATION_ERROR_MESSAGE)

        self._status = VerificationStatus.VERIFIED
        if self.draft.patient_info is not None:
            self._set_form(self.draft.patient_info)
        else:
            self._set_form(user.to_patient_info())
            self._request_update(DraftUpdate(patient_info=self._form))

        logger.info(f"Patient {user.id} verified for draft {self.draft.id}")
        return self._status

    def _fail(self, message: str) -> VerificationStatus:
        self._status = VerificationStatus.FAILED
        self._failure_message = message
        logger.warning(f"Verification failed for draft {self.draft.id}: {message}")
        return self._status

    def _set_form(self, form: PatientInfo) -> None:
        self._form = form
        self._errors = form.validate()

    def update_field(self, field_name: str, value: str) -> dict[str, str]:
        """Change one form field and re-run validation.

        Args:
            field_name: One of the PatientInfo fields.
            value: New value.

        Returns:
            Current validation errors.

        Raises:
            InvalidOperationException: If the patient is not verified.
            ValueError: If ``field_name`` is unknown.
        """
        if self._status != VerificationStatus.VERIFIED:
            raise InvalidOperationException("update_patient_info", self._status.value)
        self._set_form(self._form.with_field(field_name, value))
        return self.errors

    def update_fields(self, values: dict[str, str]) -> dict[str, str]:
        for field_name, value in values.items():
            self.update_field(field_name, value)
        return self.errors

    def complete(self) -> DraftUpdate | None:
        if not self.is_valid:
            return None
        return DraftUpdate(patient_info=self._form)

    def to_view(self) -> dict[str, Any]:
        return {
            "step": self.step_name,
            "status": self._status.value,
            "failure_message": self._failure_message,
            "form": self._form.to_dict(),
            "errors": self.errors,
            "can_advance": self.is_valid,
        }
