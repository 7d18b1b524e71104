"""Booking State Value Object.

States of the booking workflow and their valid transitions.
"""

from enum import Enum


class BookingState(str, Enum):
    """Workflow state machine.

    A single enum replaces the step index plus "show X view" flags, so
    contradictory combinations (confirmed and modifying at once) cannot exist.
    """

    STEP1_VERIFY = "step1_verify"
    STEP2_SELECT_PROVIDER = "step2_select_provider"
    STEP3_SELECT_SLOT = "step3_select_slot"
    CONFIRMED = "confirmed"
    MODIFYING = "modifying"
    ERROR = "error"
    EXITED = "exited"

    @property
    def display_name(self) -> str:
        """Title shown above the active view."""
        names = {
            "step1_verify": "Verify Information",
            "step2_select_provider": "Select Doctor",
            "step3_select_slot": "Select Time Slot",
            "confirmed": "Appointment Confirmed",
            "modifying": "Modify Appointment",
            "error": "Booking Error",
            "exited": "Finished",
        }
        return names.get(self.value, self.value)

    @property
    def step_number(self) -> int | None:
        """Position in the 3-step progress bar, None outside the steps."""
        steps = {
            "step1_verify": 1,
            "step2_select_provider": 2,
            "step3_select_slot": 3,
        }
        return steps.get(self.value)

    def can_transition_to(self, new_state: "BookingState") -> bool:
        """Check whether the workflow may move to ``new_state``.

        State machine:
        - step1_verify -> step2_select_provider, exited
        - step2_select_provider -> step3_select_slot, step1_verify, exited
        - step3_select_slot -> confirmed, error, step2_select_provider, exited
        - error -> step3_select_slot (try again), step1_verify (restart), exited
        - confirmed -> modifying, exited
        - modifying -> confirmed, exited
        - exited -> (final state)
        """
        transitions: dict[str, list[str]] = {
            "step1_verify": ["step2_select_provider", "exited"],
            "step2_select_provider": ["step3_select_slot", "step1_verify", "exited"],
            "step3_select_slot": ["confirmed", "error", "step2_select_provider", "exited"],
            "error": ["step3_select_slot", "step1_verify", "exited"],
            "confirmed": ["modifying", "exited"],
            "modifying": ["confirmed", "exited"],
            "exited": [],
        }
        return new_state.value in transitions.get(self.value, [])

    def is_step(self) -> bool:
        """Is this one of the three data-entry steps?"""
        return self.step_number is not None

    def is_final(self) -> bool:
        return self is BookingState.EXITED


class ExitReason(str, Enum):
    """Why the workflow reached its terminal state."""

    DONE = "done"
    CANCELLED = "cancelled"
    ABANDONED = "abandoned"
