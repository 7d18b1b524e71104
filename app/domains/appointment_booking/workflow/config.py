# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Configuration dataclass for the booking workflow.
# ============================================================================
"""Workflow configuration for Appointment Booking.

Typed configuration for the controller and the slot engine, built from
application settings or a plain dictionary.
"""

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.config.settings import Settings


@dataclass(frozen=True)
class WorkflowConfig:
    """Typed configuration for the booking workflow.

    Attributes:
        slot_start_hour: First bookable hour (inclusive).
        slot_end_hour: Last bookable hour (inclusive).
        lunch_hour: Hour skipped every day, or None for no break.
        suggestion_window_days: Days scanned for alternative dates.
        max_suggestions: Maximum alternative dates offered.
        upcoming_days: Length of the date picker window.
        redirect_seconds: Countdown on the success view before returning to
            the dashboard. 0 disables the countdown.
    """

    slot_start_hour: int = 9
    slot_end_hour: int = 16
    lunch_hour: int | None = 12
    suggestion_window_days: int = 14
    max_suggestions: int = 3
    upcoming_days: int = 7
    redirect_seconds: int = 10

    def __post_init__(self) -> None:
        if not 0 <= self.slot_start_hour <= self.slot_end_hour <= 23:
            raise ValueError(
                f"Invalid slot hours: start={self.slot_start_hour}, end={self.slot_end_hour}"
            )
        if self.max_suggestions < 0 or self.suggestion_window_days < 0:
            raise ValueError("Suggestion settings must not be negative")
        if self.redirect_seconds < 0:
            raise ValueError("redirect_seconds must not be negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowConfig":
        """Create WorkflowConfig from a dictionary, ignoring unknown keys.

        Raises:
            ValueError: If a value is out of range.
        """
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_settings(cls, settings: "Settings") -> "WorkflowConfig":
        return cls(
            slot_start_hour=settings.BOOKING_SLOT_START_HOUR,
            slot_end_hour=settings.BOOKING_SLOT_END_HOUR,
            lunch_hour=settings.BOOKING_LUNCH_HOUR,
            suggestion_window_days=settings.BOOKING_SUGGESTION_WINDOW_DAYS,
            max_suggestions=settings.BOOKING_MAX_SUGGESTIONS,
            upcoming_days=settings.BOOKING_UPCOMING_DAYS,
            redirect_seconds=settings.BOOKING_REDIRECT_SECONDS,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
