# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Booking controller - state machine and single draft writer.
# ============================================================================
"""Booking Controller.

Drives the booking workflow:

    STEP1_VERIFY -> STEP2_SELECT_PROVIDER -> STEP3_SELECT_SLOT
        -> CONFIRMED <-> MODIFYING -> EXITED
        -> ERROR -> STEP3_SELECT_SLOT | STEP1_VERIFY | EXITED

The controller is the only writer of the draft. Steps either return a
``DraftUpdate`` from ``complete()`` or call the ``request_update`` callback
the controller handed them, and the controller checks that the step owns
every field it writes.

Rejected user actions (advancing an invalid step, modifying outside the
confirmation view, ...) return False and leave the state unchanged.
Illegal transitions and field ownership violations are programming errors
and raise ``InvalidOperationException``.
"""

import logging
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any

from app.core.domain.exceptions import InvalidOperationException

from ..application.dto.booking_dtos import SubmissionResult
from ..application.services.notification_dispatcher import NotificationDispatcher
from ..application.services.slot_availability import SlotAvailabilityEngine
from ..domain.entities.appointment_draft import AppointmentDraft, DraftUpdate
from ..domain.events import AppointmentConfirmed
from ..domain.value_objects.booking_state import BookingState, ExitReason
from ..domain.value_objects.draft_status import DraftStatus
from .config import WorkflowConfig
from .countdown import RedirectCountdown
from .steps import (
    BaseStep,
    ConfirmationPresenter,
    IdentityVerificationStep,
    ModificationHandler,
    ProviderSelectionStep,
    SlotSelectionStep,
)

if TYPE_CHECKING:
    from ..application.ports import (
        IAppointmentSubmitter,
        IIdentityProvider,
        INotificationService,
        IProviderDirectory,
        ISlotReservation,
    )

logger = logging.getLogger(__name__)

UNEXPECTED_SUBMISSION_ERROR = "An unexpected error occurred. Please try again."

# States in which the draft is unconfirmed and can still be abandoned
ABANDONABLE_STATES = frozenset(
    {
        BookingState.STEP1_VERIFY,
        BookingState.STEP2_SELECT_PROVIDER,
        BookingState.STEP3_SELECT_SLOT,
        BookingState.ERROR,
    }
)


class BookingController:
    """Orchestrates the booking steps around one draft."""

    def __init__(
        self,
        identity: "IIdentityProvider",
        directory: "IProviderDirectory",
        reservation: "ISlotReservation",
        submitter: "IAppointmentSubmitter",
        notifier: "INotificationService | None" = None,
        draft: AppointmentDraft | None = None,
        config: WorkflowConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize controller.

        Args:
            identity: Identity/session port.
            directory: Provider directory port.
            reservation: Slot occupancy and reservation port.
            submitter: Booking backend port.
            notifier: Optional notification port (fire-and-forget).
            draft: Existing draft to resume. A new one is created if None.
            config: Workflow configuration.
            today: Clock used by the date picker.
        """
        self._config = config or WorkflowConfig()
        self._draft = draft if draft is not None else AppointmentDraft.create()
        self._submitter = submitter
        self._dispatcher = NotificationDispatcher(notifier)
        self._engine = SlotAvailabilityEngine(
            reservation,
            start_hour=self._config.slot_start_hour,
            end_hour=self._config.slot_end_hour,
            lunch_hour=self._config.lunch_hour,
            suggestion_window_days=self._config.suggestion_window_days,
            max_suggestions=self._config.max_suggestions,
            upcoming_days=self._config.upcoming_days,
        )

        self._state = BookingState.STEP1_VERIFY
        self._started = False
        self._exit_reason: ExitReason | None = None
        self._error_message: str | None = None

        # Submitted-once guard, keyed by draft version.
        self._submitted_version: int | None = None
        self._last_result: SubmissionResult | None = None
        self._submitting = False

        self._countdown: RedirectCountdown | None = None

        self.verification = IdentityVerificationStep(identity, self._draft)
        self.provider_selection = ProviderSelectionStep(directory, self._draft)
        self.slot_selection = SlotSelectionStep(self._engine, self._draft, today=today)
        self.confirmation = ConfirmationPresenter(self._draft, on_modify=self.modify, on_done=self.done)
        self.modification = ModificationHandler(self._draft)
        for step in (self.verification, self.provider_selection, self.slot_selection, self.modification):
            step.attach(self._requester_for(step))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> BookingState:
        return self._state

    @property
    def draft(self) -> AppointmentDraft:
        return self._draft

    @property
    def can_abandon(self) -> bool:
        return not self._submitting and self._state in ABANDONABLE_STATES

    @property
    def exit_reason(self) -> ExitReason | None:
        return self._exit_reason

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def last_result(self) -> SubmissionResult | None:
        return self._last_result

    @property
    def countdown(self) -> RedirectCountdown | None:
        return self._countdown

    @property
    def notifications(self) -> NotificationDispatcher:
        return self._dispatcher

    @property
    def active_step(self) -> BaseStep | None:
        steps: dict[BookingState, BaseStep] = {
            BookingState.STEP1_VERIFY: self.verification,
            BookingState.STEP2_SELECT_PROVIDER: self.provider_selection,
            BookingState.STEP3_SELECT_SLOT: self.slot_selection,
            BookingState.CONFIRMED: self.confirmation,
            BookingState.MODIFYING: self.modification,
        }
        return steps.get(self._state)

    # =========================================================================
    # Draft ownership
    # =========================================================================

    def _requester_for(self, step: BaseStep) -> Callable[[DraftUpdate], list[str]]:
        def request(update: DraftUpdate) -> list[str]:
            return self.request_update(step, update)

        return request

    def request_update(self, step: BaseStep, update: DraftUpdate) -> list[str]:
        """Apply a step's partial update to the draft.

        Args:
            step: Step asking for the change. Must be the active step.
            update: Fields to change. Must be owned by ``step``.

        Returns:
            Names of the fields that changed.

        Raises:
            InvalidOperationException: If the step is not active, writes a
                field it does not own, or the draft rejects the change.
        """
        if step is not self.active_step:
            raise InvalidOperationException(
                "request_update", self._state.value, f"Step '{step.step_name}' is not the active step"
            )
        foreign = update.field_names - step.EDITABLE_FIELDS
        if foreign:
            raise InvalidOperationException(
                "request_update",
                self._state.value,
                f"Step '{step.step_name}' cannot write: {', '.join(sorted(foreign))}",
            )
        return self._apply(update)

    def _apply(self, update: DraftUpdate) -> list[str]:
        try:
            changed = self._draft.apply(update)
        except ValueError as e:
            raise InvalidOperationException("request_update", self._state.value, str(e)) from e
        if changed:
            logger.debug(f"Draft {self._draft.id} v{self._draft.version} changed: {changed}")
        return changed

    # =========================================================================
    # Transitions
    # =========================================================================

    async def _transition(self, target: BookingState) -> None:
        if not self._state.can_transition_to(target):
            raise InvalidOperationException("transition", self._state.value, f"Cannot go to '{target.value}'")

        previous = self._state
        self._state = target
        logger.info(f"Draft {self._draft.id}: {previous.value} -> {target.value}")

        if previous == BookingState.CONFIRMED and self._countdown is not None:
            self._countdown.cancel()

        step = self.active_step
        if step is not None:
            await step.enter()

    async def _exit(self, reason: ExitReason) -> None:
        await self._transition(BookingState.EXITED)
        self._exit_reason = reason
        logger.info(f"Workflow for draft {self._draft.id} exited: {reason.value}")

    def _start_countdown(self) -> None:
        if self._config.redirect_seconds <= 0:
            return
        self._countdown = RedirectCountdown(self._config.redirect_seconds, self._on_countdown_expired)
        self._countdown.start()

    async def _on_countdown_expired(self) -> None:
        if self._state == BookingState.CONFIRMED:
            await self._exit(ExitReason.DONE)

    def _dispatch_events(self) -> None:
        for event in self._draft.pull_domain_events():
            logger.info(f"Domain event {event.event_type} for draft {self._draft.id}")
            if isinstance(event, AppointmentConfirmed):
                self._dispatcher.dispatch(self._draft)

    async def start(self) -> BookingState:
        """Enter the workflow.

        A fresh or open draft starts at verification. A confirmed draft is
        re-entered at the confirmation view. A cancelled or abandoned draft
        is never restored and the workflow exits immediately.
        """
        if self._started:
            return self._state
        self._started = True

        status = self._draft.status
        if status == DraftStatus.CONFIRMED:
            self._state = BookingState.CONFIRMED
            logger.info(f"Resuming confirmed draft {self._draft.id}")
            await self.confirmation.enter()
        elif status.is_final():
            self._state = BookingState.EXITED
            self._exit_reason = ExitReason.CANCELLED if status == DraftStatus.CANCELLED else ExitReason.ABANDONED
            logger.warning(f"Draft {self._draft.id} is {status.value}; not restoring it")
        else:
            logger.info(f"Starting booking workflow for draft {self._draft.id}")
            await self.verification.enter()
        return self._state

    # =========================================================================
    # Step navigation
    # =========================================================================

    async def advance(self) -> bool:
        """Commit the active step and move forward.

        On the slot step this submits the draft.

        Returns:
            True if the workflow moved forward. False if the step is not
            valid yet (or the state has no forward move); nothing changes.
        """
        forward: dict[BookingState, BookingState] = {
            BookingState.STEP1_VERIFY: BookingState.STEP2_SELECT_PROVIDER,
            BookingState.STEP2_SELECT_PROVIDER: BookingState.STEP3_SELECT_SLOT,
        }
        step = self.active_step
        if step is None or not self._state.is_step():
            logger.warning(f"advance() ignored in state {self._state.value}")
            return False

        update = step.complete()
        if update is None:
            logger.info(f"advance() rejected: {step.step_name} is not valid yet")
            return False

        self.request_update(step, update)

        if self._state in forward:
            await self._transition(forward[self._state])
            return True

        result = await self.submit()
        return result is not None and result.success

    async def go_back(self) -> bool:
        """Return to the previous step. Entered data is kept.

        Returns:
            True if there was a previous step to go to.
        """
        backward: dict[BookingState, BookingState] = {
            BookingState.STEP2_SELECT_PROVIDER: BookingState.STEP1_VERIFY,
            BookingState.STEP3_SELECT_SLOT: BookingState.STEP2_SELECT_PROVIDER,
        }
        target = backward.get(self._state)
        if target is None or self._submitting:
            logger.warning(f"go_back() ignored in state {self._state.value}")
            return False
        await self._transition(target)
        return True

    async def abandon(self) -> bool:
        """Leave before confirmation, discarding the draft."""
        if not self.can_abandon:
            logger.warning(f"abandon() ignored in state {self._state.value}")
            return False

        await self.slot_selection.release_hold()
        self._draft.abandon()
        self._error_message = None
        await self._exit(ExitReason.ABANDONED)
        return True

    # =========================================================================
    # Submission
    # =========================================================================

    async def submit(self) -> SubmissionResult | None:
        """Submit the draft to the booking backend.

        Idempotent per draft identity and version: while the draft has not
        changed since the last attempt the previous result is returned and
        the backend is not called again. A call during an in-flight
        submission is ignored.

        Returns:
            The submission result, or None if nothing was submitted.
        """
        if self._submitting:
            logger.warning(f"Submission already in flight for draft {self._draft.id}")
            return None

        if self._submitted_version == self._draft.version:
            logger.info(f"Draft {self._draft.id} v{self._draft.version} unchanged; not resubmitting")
            return self._last_result

        if self._state != BookingState.STEP3_SELECT_SLOT:
            logger.warning(f"submit() ignored in state {self._state.value}")
            return None

        missing = self._draft.missing_for_submission()
        if missing:
            logger.warning(f"Draft {self._draft.id} not ready for submission, missing: {missing}")
            return None

        self._submitting = True
        self._submitted_version = self._draft.version
        logger.info(f"Submitting draft {self._draft.id} v{self._draft.version}")
        try:
            result = await self._submitter.submit_appointment(self._draft)
        except Exception as e:
            logger.error(f"Appointment submission failed for draft {self._draft.id}: {e}", exc_info=True)
            result = SubmissionResult.failed(UNEXPECTED_SUBMISSION_ERROR)
        finally:
            self._submitting = False

        self._last_result = result
        if result.success:
            self._draft.confirm(result.confirmation_id or "")
            self._submitted_version = self._draft.version
            logger.info(f"Draft {self._draft.id} confirmed as {result.confirmation_id}")
            self._dispatch_events()
            await self._transition(BookingState.CONFIRMED)
            self._start_countdown()
        else:
            self._error_message = result.reason
            logger.warning(f"Draft {self._draft.id} rejected: {result.reason}")
            await self._transition(BookingState.ERROR)
        return result

    # =========================================================================
    # Error view actions
    # =========================================================================

    async def retry(self) -> bool:
        """Clear the error and return to the slot step ("try again").

        This is the explicit actor-initiated retry that re-arms submission
        for an unchanged draft.
        """
        if self._state != BookingState.ERROR:
            logger.warning(f"retry() ignored in state {self._state.value}")
            return False
        self._error_message = None
        self._submitted_version = None
        await self._transition(BookingState.STEP3_SELECT_SLOT)
        return True

    async def restart(self) -> bool:
        """Go back to verification keeping everything entered so far."""
        if self._state != BookingState.ERROR:
            logger.warning(f"restart() ignored in state {self._state.value}")
            return False
        self._error_message = None
        self._submitted_version = None
        await self._transition(BookingState.STEP1_VERIFY)
        return True

    async def return_to_dashboard(self) -> bool:
        """Leave the error view, abandoning the draft."""
        if self._state != BookingState.ERROR:
            logger.warning(f"return_to_dashboard() ignored in state {self._state.value}")
            return False
        return await self.abandon()

    # =========================================================================
    # Confirmation actions
    # =========================================================================

    async def modify(self) -> bool:
        if self._state != BookingState.CONFIRMED or not self.confirmation.has_required_data:
            logger.warning(f"modify() ignored in state {self._state.value}")
            return False
        await self._transition(BookingState.MODIFYING)
        return True

    async def done(self) -> bool:
        """Hand off to the dashboard."""
        if self._state != BookingState.CONFIRMED:
            logger.warning(f"done() ignored in state {self._state.value}")
            return False
        await self._exit(ExitReason.DONE)
        return True

    # =========================================================================
    # Modification actions
    # =========================================================================

    async def save_modification(self) -> bool:
        """Write the mutable subset back and return to confirmation."""
        if self._state != BookingState.MODIFYING:
            logger.warning(f"save_modification() ignored in state {self._state.value}")
            return False

        update = self.modification.complete()
        if update is None:
            logger.info("save_modification() rejected: form is not valid")
            return False

        self.request_update(self.modification, update)
        self._dispatch_events()
        await self._transition(BookingState.CONFIRMED)
        return True

    async def discard_modification(self) -> bool:
        """Back to confirmation without writing anything."""
        if self._state != BookingState.MODIFYING:
            logger.warning(f"discard_modification() ignored in state {self._state.value}")
            return False
        await self._transition(BookingState.CONFIRMED)
        return True

    def request_cancellation(self) -> bool:
        if self._state != BookingState.MODIFYING:
            logger.warning(f"request_cancellation() ignored in state {self._state.value}")
            return False
        self.modification.request_cancellation()
        return True

    def keep_appointment(self) -> bool:
        if self._state != BookingState.MODIFYING:
            logger.warning(f"keep_appointment() ignored in state {self._state.value}")
            return False
        self.modification.abort_cancellation()
        return True

    async def confirm_cancellation(self) -> bool:
        """Second step of cancel: terminal for the workflow and the draft."""
        if self._state != BookingState.MODIFYING or not self.modification.cancel_requested:
            logger.warning("confirm_cancellation() ignored: cancellation was not requested")
            return False

        self._draft.cancel()
        slot = self._draft.selected_slot
        if slot is not None:
            await self._engine.release(slot, self._draft.id or "")
        self._dispatch_events()
        await self._exit(ExitReason.CANCELLED)
        return True

    # =========================================================================
    # Teardown and views
    # =========================================================================

    async def close(self) -> None:
        """Release background resources. Safe to call more than once."""
        if self._countdown is not None:
            await self._countdown.close()
        logger.debug(f"Controller for draft {self._draft.id} closed")

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of the workflow for rendering."""
        step = self.active_step
        return {
            "state": self._state.value,
            "title": self._state.display_name,
            "step_number": self._state.step_number,
            "exit_reason": self._exit_reason.value if self._exit_reason else None,
            "error_message": self._error_message,
            "redirect_in": self._countdown.remaining if self._countdown and self._countdown.is_running else None,
            "draft": self._draft.to_summary_dict(),
            "view": step.to_view() if step is not None else None,
        }
