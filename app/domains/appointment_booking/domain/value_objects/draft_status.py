"""Draft Status Value Object.

Lifecycle of an appointment draft, independent of the workflow view state.
"""

from enum import Enum


class DraftStatus(str, Enum):
    """Draft lifecycle with a transition table."""

    OPEN = "open"  # being filled in by the steps
    CONFIRMED = "confirmed"  # accepted by the booking backend
    CANCELLED = "cancelled"  # cancelled after confirmation
    ABANDONED = "abandoned"  # discarded before confirmation

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def can_transition_to(self, new_status: "DraftStatus") -> bool:
        """Validate a draft status transition.

        State machine:
        - open -> confirmed, abandoned
        - confirmed -> cancelled
        - cancelled -> (final state)
        - abandoned -> (final state)
        """
        transitions: dict[str, list[str]] = {
            "open": ["confirmed", "abandoned"],
            "confirmed": ["cancelled"],
            "cancelled": [],
            "abandoned": [],
        }
        return new_status.value in transitions.get(self.value, [])

    def is_final(self) -> bool:
        """Can a draft in this status still be resumed?"""
        return self.value in ["cancelled", "abandoned"]
