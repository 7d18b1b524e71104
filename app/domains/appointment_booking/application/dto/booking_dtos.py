# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Data Transfer Objects exchanged with ports and views.
# ============================================================================
"""Booking DTOs.

Data Transfer Objects for the identity profile, submission outcome and
slot selection results.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from ...domain.entities.time_slot import SlotList, TimeSlot
from ...domain.value_objects.patient_info import PatientInfo

# =============================================================================
# Identity DTOs
# =============================================================================


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated actor as reported by the identity service."""

    id: str
    role: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    phone: str = ""
    date_of_birth: str = ""
    address: str = ""
    insurance: str = ""

    @property
    def full_name(self) -> str:
        """First and last name when both are known, otherwise ``name``."""
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.name

    @property
    def is_patient(self) -> bool:
        return self.role.lower() == "patient"

    def to_patient_info(self) -> PatientInfo:
        """Prefill the verification form from the profile."""
        return PatientInfo(
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            date_of_birth=self.date_of_birth,
            address=self.address,
            insurance=self.insurance,
        )

    @classmethod
    def from_external_data(cls, data: dict[str, Any]) -> "CurrentUser":
        """Create DTO from identity service data (camelCase or snake_case)."""
        return cls(
            id=str(data.get("id") or ""),
            role=data.get("role") or "",
            email=data.get("email") or "",
            first_name=data.get("first_name") or data.get("firstName") or "",
            last_name=data.get("last_name") or data.get("lastName") or "",
            name=data.get("name") or "",
            phone=data.get("phone") or "",
            date_of_birth=data.get("date_of_birth") or data.get("dateOfBirth") or "",
            address=data.get("address") or "",
            insurance=data.get("insurance") or data.get("healthInsurance") or "",
        )


# =============================================================================
# Submission DTOs
# =============================================================================


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of submitting a draft to the booking backend.

    Failure reasons are opaque strings shown to the patient verbatim.
    """

    success: bool
    confirmation_id: str | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, confirmation_id: str) -> "SubmissionResult":
        """Factory for an accepted booking."""
        return cls(success=True, confirmation_id=confirmation_id)

    @classmethod
    def failed(cls, reason: str) -> "SubmissionResult":
        """Factory for a rejected booking."""
        return cls(success=False, reason=reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "confirmation_id": self.confirmation_id,
            "reason": self.reason,
        }


# =============================================================================
# Slot DTOs
# =============================================================================


@dataclass(frozen=True)
class UpcomingDateDTO:
    """Entry of the date picker."""

    date: date
    day_name: str
    provider_available: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "day_name": self.day_name,
            "provider_available": self.provider_available,
        }


@dataclass
class SlotListing:
    """Slots for one (provider, date) pair plus fallback suggestions."""

    slot_list: SlotList
    alternative_dates: list[date] = field(default_factory=list)

    @property
    def provider_unavailable(self) -> bool:
        return not self.slot_list.provider_available


class SlotSelectionStatus(str, Enum):
    """Outcome of trying to pick a slot."""

    RESERVED = "reserved"  # re-check passed, slot held for this draft
    ALREADY_HELD = "already_held"  # same slot picked again, kept as is
    RACE_LOST = "race_lost"  # taken by someone else at selection time
    UNAVAILABLE = "unavailable"  # unknown or already unavailable slot


@dataclass(frozen=True)
class SlotSelectionResult:
    """Result of a slot selection attempt."""

    status: SlotSelectionStatus
    slot: TimeSlot | None = None
    notice: str | None = None

    @property
    def selected(self) -> bool:
        return self.status in (SlotSelectionStatus.RESERVED, SlotSelectionStatus.ALREADY_HELD)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "selected": self.selected,
            "slot": self.slot.to_dict() if self.slot else None,
            "notice": self.notice,
        }
