# ============================================================================
# SCOPE: PATIENT API
# Description: Pydantic schemas for the appointment booking API.
# ============================================================================
"""
Booking API Schemas.

Pydantic models for the booking session endpoints:
- Session snapshots
- Step form updates
- Action results
"""

from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domains.appointment_booking.domain.value_objects import AppointmentType
from app.domains.appointment_booking.workflow.steps.provider_selection import SelectionMode


# ============================================================================
# Session Schemas
# ============================================================================


class BookingSessionResponse(BaseModel):
    """Snapshot of one booking session."""

    session_id: str
    state: str = Field(..., description="Workflow state")
    title: str = Field(..., description="Human-readable title of the current view")
    step_number: int | None = Field(default=None, description="1-3 while in a form step")
    exit_reason: str | None = None
    error_message: str | None = None
    redirect_in: int | None = Field(default=None, description="Seconds before the success view redirects")
    draft: dict[str, Any]
    view: dict[str, Any] | None = Field(default=None, description="Active step view model")


class BookingActionResponse(BaseModel):
    """Result of a workflow action plus the resulting session snapshot."""

    accepted: bool = Field(..., description="False when the action was not valid in the current state")
    result: dict[str, Any] | None = Field(default=None, description="Action-specific outcome")
    session: BookingSessionResponse


# ============================================================================
# Step 1 - Patient Information
# ============================================================================


class PatientInfoUpdate(BaseModel):
    """Patient information fields to change. Omitted fields are kept."""

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    date_of_birth: str | None = None
    address: str | None = None
    insurance: str | None = None

    def changed_fields(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


# ============================================================================
# Step 2 - Provider Selection
# ============================================================================


class ProviderFiltersUpdate(BaseModel):
    search: str | None = Field(default=None, description="Case-insensitive substring of the provider name")
    specialty: str | None = Field(default=None, description="Exact specialty, empty string clears it")


class ProviderModeUpdate(BaseModel):
    mode: SelectionMode


class DepartmentSelection(BaseModel):
    department_id: str | None = Field(default=None, description="Department id, null returns to the grid")


class ProviderChoice(BaseModel):
    provider_id: str


# ============================================================================
# Step 3 - Slot Selection
# ============================================================================


class SlotDateSelection(BaseModel):
    date: datetime.date


class SlotChoice(BaseModel):
    slot_id: str


class AppointmentDetailsUpdate(BaseModel):
    """Appointment details shared by the slot step and the modification form."""

    appointment_type: AppointmentType | None = None
    reason: str | None = None
    email: bool | None = Field(default=None, description="Email notification opt-in")
    sms: bool | None = Field(default=None, description="SMS notification opt-in")


# ============================================================================
# Directory Schemas
# ============================================================================


class ProviderResponse(BaseModel):
    id: str
    name: str
    specialty: str
    department: str
    availability: str = Field(..., description="Weekdays in calendar order, e.g. \"Mon, Wed, Fri\"")
    rating: float
    experience_years: int
    avatar_url: str | None = None


class DepartmentResponse(BaseModel):
    id: str
    name: str
    description: str
    icon_class: str | None = None
    provider_count: int = 0
