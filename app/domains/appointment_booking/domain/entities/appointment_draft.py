"""Appointment Draft - Aggregate Root.

The in-progress booking request accumulated across the workflow steps.
"""

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from typing import Any

from app.core.domain.entities import AggregateRoot, generate_uuid_str

from ..events import AppointmentCancelled, AppointmentConfirmed, AppointmentModified
from ..value_objects.appointment_type import AppointmentType
from ..value_objects.draft_status import DraftStatus
from ..value_objects.notification_preferences import NotificationPreferences
from ..value_objects.patient_info import PatientInfo
from .provider import Provider
from .time_slot import TimeSlot

# Fields a confirmed appointment may still change.
MUTABLE_AFTER_CONFIRMATION = frozenset({"appointment_type", "reason", "notification_prefs"})


@dataclass(frozen=True)
class DraftUpdate:
    """Partial update of a draft. ``None`` means "leave unchanged"."""

    patient_info: PatientInfo | None = None
    selected_provider: Provider | None = None
    selected_slot: TimeSlot | None = None
    appointment_type: AppointmentType | None = None
    reason: str | None = None
    notification_prefs: NotificationPreferences | None = None

    @property
    def field_names(self) -> frozenset[str]:
        """Names of the fields this update touches."""
        return frozenset(f.name for f in fields(self) if getattr(self, f.name) is not None)

    def is_empty(self) -> bool:
        return not self.field_names


@dataclass(eq=False)
class AppointmentDraft(AggregateRoot[str]):
    """Booking request aggregate.

    Every applied change bumps ``version``; the workflow uses it to decide
    whether a submission would duplicate an earlier one.
    """

    patient_info: PatientInfo | None = None
    selected_provider: Provider | None = None
    selected_slot: TimeSlot | None = None
    appointment_type: AppointmentType | None = None
    reason: str = ""
    notification_prefs: NotificationPreferences = field(default_factory=NotificationPreferences)

    status: DraftStatus = DraftStatus.OPEN
    confirmation_id: str | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def create(cls) -> "AppointmentDraft":
        """Create an empty draft with a fresh identity."""
        return cls(id=generate_uuid_str())

    def apply(self, update: DraftUpdate) -> list[str]:
        """Apply a partial update.

        Picking a different provider clears the selected slot, since a slot
        belongs to exactly one provider.

        Args:
            update: Fields to change.

        Returns:
            Names of the fields whose value actually changed.

        Raises:
            ValueError: If the draft is final, or if a confirmed draft is
                asked to change a field outside the mutable subset.
        """
        if self.status.is_final():
            raise ValueError(f"Cannot update a draft in status {self.status.display_name}")
        if self.status == DraftStatus.CONFIRMED:
            locked = update.field_names - MUTABLE_AFTER_CONFIRMATION
            if locked:
                raise ValueError(f"Fields locked after confirmation: {', '.join(sorted(locked))}")

        changed: list[str] = []
        for name in sorted(update.field_names):
            value = getattr(update, name)
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed.append(name)

        if (
            "selected_provider" in changed
            and "selected_slot" not in changed
            and self.selected_slot is not None
            and self.selected_provider is not None
            and self.selected_slot.provider_id != self.selected_provider.id
        ):
            self.selected_slot = None
            changed.append("selected_slot")

        if changed:
            self.increment_version()
            if self.status == DraftStatus.CONFIRMED:
                self._record_event(
                    AppointmentModified(
                        draft_id=self.id or "",
                        confirmation_id=self.confirmation_id or "",
                        changed_fields=tuple(changed),
                    )
                )
        return changed

    def missing_for_submission(self) -> list[str]:
        """Names of the fields still blocking submission."""
        missing: list[str] = []
        if self.patient_info is None or not self.patient_info.is_valid():
            missing.append("patient_info")
        if self.selected_provider is None:
            missing.append("selected_provider")
        if self.selected_slot is None:
            missing.append("selected_slot")
        if self.appointment_type is None:
            missing.append("appointment_type")
        if not self.reason.strip():
            missing.append("reason")
        return missing

    def is_ready_for_submission(self) -> bool:
        return not self.missing_for_submission()

    # State transitions
    def confirm(self, confirmation_id: str) -> None:
        """Mark the draft as accepted by the booking backend.

        Raises:
            ValueError: If the draft cannot be confirmed from its current status.
        """
        if not self.status.can_transition_to(DraftStatus.CONFIRMED):
            raise ValueError(f"Cannot confirm draft in status {self.status.display_name}")
        self.status = DraftStatus.CONFIRMED
        self.confirmation_id = confirmation_id
        self.confirmed_at = datetime.now(UTC)
        self.increment_version()
        self._record_event(
            AppointmentConfirmed(
                draft_id=self.id or "",
                confirmation_id=confirmation_id,
                provider_id=self.selected_provider.id if self.selected_provider else "",
                slot_id=self.selected_slot.id if self.selected_slot else "",
            )
        )

    def cancel(self) -> None:
        """Cancel a confirmed appointment. Terminal.

        Raises:
            ValueError: If the draft is not confirmed.
        """
        if not self.status.can_transition_to(DraftStatus.CANCELLED):
            raise ValueError(f"Cannot cancel draft in status {self.status.display_name}")
        self.status = DraftStatus.CANCELLED
        self.cancelled_at = datetime.now(UTC)
        self.increment_version()
        self._record_event(
            AppointmentCancelled(
                draft_id=self.id or "",
                confirmation_id=self.confirmation_id or "",
                provider_id=self.selected_provider.id if self.selected_provider else "",
                slot_id=self.selected_slot.id if self.selected_slot else "",
            )
        )

    def abandon(self) -> None:
        """Discard an unconfirmed draft. Terminal.

        Raises:
            ValueError: If the draft was already confirmed or is final.
        """
        if not self.status.can_transition_to(DraftStatus.ABANDONED):
            raise ValueError(f"Cannot abandon draft in status {self.status.display_name}")
        self.status = DraftStatus.ABANDONED
        self.increment_version()

    # Query methods
    @property
    def is_confirmed(self) -> bool:
        return self.status == DraftStatus.CONFIRMED

    @property
    def is_discarded(self) -> bool:
        return self.status.is_final()

    def to_summary_dict(self) -> dict[str, Any]:
        """Plain dictionary for views and API responses."""
        return {
            "id": self.id,
            "version": self.version,
            "status": self.status.value,
            "confirmation_id": self.confirmation_id,
            "patient_info": self.patient_info.to_dict() if self.patient_info else None,
            "selected_provider": self.selected_provider.to_dict() if self.selected_provider else None,
            "selected_slot": self.selected_slot.to_dict() if self.selected_slot else None,
            "appointment_type": self.appointment_type.value if self.appointment_type else None,
            "reason": self.reason,
            "notification_prefs": self.notification_prefs.to_dict(),
        }
