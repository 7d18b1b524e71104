"""
Shared pytest fixtures for all tests.

This module provides the simulated collaborators, a fixed clock, controller
factories and the FastAPI client used across the booking tests.
"""

import os
from collections.abc import Awaitable, Callable, Generator
from datetime import date
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["BOOKING_REDIRECT_SECONDS"] = "0"

from app.core.container import get_container, reset_container  # noqa: E402
from app.domains.appointment_booking.application.dto import CurrentUser, SlotSelectionResult  # noqa: E402
from app.domains.appointment_booking.domain.entities import AppointmentDraft  # noqa: E402
from app.domains.appointment_booking.domain.value_objects import AppointmentType, PatientInfo  # noqa: E402
from app.domains.appointment_booking.infrastructure.simulated import (  # noqa: E402
    InMemoryIdentityProvider,
    InMemoryProviderDirectory,
    LoggingNotificationService,
    SimulatedAppointmentBackend,
    SimulatedSlotReservation,
)
from app.domains.appointment_booking.infrastructure.simulated.seed_data import DEMO_USERS  # noqa: E402
from app.domains.appointment_booking.workflow import BookingController, WorkflowConfig  # noqa: E402

# A Monday. Provider "1" works Mon/Wed/Fri, provider "3" works Tue/Thu.
TODAY = date(2026, 10, 19)


# ============================================================================
# IDENTITY FIXTURES
# ============================================================================


@pytest.fixture
def patient_user() -> CurrentUser:
    """Authenticated patient with a complete profile."""
    return CurrentUser.from_external_data(DEMO_USERS["demo-patient-token"])


@pytest.fixture
def patient_identity(patient_user) -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider(patient_user)


@pytest.fixture
def complete_patient_info() -> PatientInfo:
    return PatientInfo(
        full_name="Linh Tran",
        email="linh.tran@example.com",
        phone="+84 90 123 4567",
        date_of_birth="1990-04-12",
        address="12 Hai Ba Trung, Hanoi",
        insurance="HI-4829-1103",
    )


# ============================================================================
# SIMULATED COLLABORATOR FIXTURES
# ============================================================================


@pytest.fixture
def directory() -> InMemoryProviderDirectory:
    return InMemoryProviderDirectory()


@pytest.fixture
def open_reservation() -> SimulatedSlotReservation:
    """Every slot open, no contention."""
    return SimulatedSlotReservation(availability_rate=1.0, race_loss_rate=0.0, fully_booked_rate=0.0)


@pytest.fixture
def accepting_backend() -> SimulatedAppointmentBackend:
    return SimulatedAppointmentBackend(success_rate=1.0)


@pytest.fixture
def rejecting_backend() -> SimulatedAppointmentBackend:
    return SimulatedAppointmentBackend(success_rate=0.0)


@pytest.fixture
def notifier() -> LoggingNotificationService:
    return LoggingNotificationService()


@pytest.fixture
def workflow_config() -> WorkflowConfig:
    """Default schedule, no redirect countdown."""
    return WorkflowConfig(redirect_seconds=0)


# ============================================================================
# CONTROLLER FIXTURES
# ============================================================================


@pytest.fixture
def make_controller(
    patient_identity,
    directory,
    open_reservation,
    accepting_backend,
    notifier,
    workflow_config,
) -> Callable[..., BookingController]:
    """Factory for controllers wired to deterministic collaborators.

    Any constructor argument can be overridden by keyword.
    """

    def _make(**overrides) -> BookingController:
        kwargs = {
            "identity": patient_identity,
            "directory": directory,
            "reservation": open_reservation,
            "submitter": accepting_backend,
            "notifier": notifier,
            "config": workflow_config,
            "today": lambda: TODAY,
        }
        kwargs.update(overrides)
        return BookingController(**kwargs)

    return _make


@pytest.fixture
def fill_slot_step() -> Callable[..., Awaitable[SlotSelectionResult]]:
    """Drive a fresh controller to a complete slot step.

    Verifies the patient, picks ``provider_id``, loads ``day`` and selects
    the ``hour`` slot, then fills in type and reason. Does not submit.
    """

    async def _fill(
        controller: BookingController,
        provider_id: str = "1",
        day: date = TODAY,
        hour: int = 10,
    ) -> SlotSelectionResult:
        await controller.start()
        assert await controller.advance() is True
        controller.provider_selection.choose(provider_id)
        assert await controller.advance() is True
        await controller.slot_selection.select_date(day)
        result = await controller.slot_selection.select_slot(f"{provider_id}-{day.isoformat()}-{hour:02d}")
        controller.slot_selection.set_appointment_type(AppointmentType.CONSULTATION)
        controller.slot_selection.set_reason("Chest pain when climbing stairs")
        return result

    return _fill


@pytest.fixture
def mock_submitter() -> AsyncMock:
    """Submitter mock that always accepts."""
    from app.domains.appointment_booking.application.dto import SubmissionResult

    submitter = AsyncMock()
    submitter.submit_appointment.return_value = SubmissionResult.ok("APT-20261019-TEST0001")
    return submitter


@pytest.fixture
def empty_draft() -> AppointmentDraft:
    return AppointmentDraft.create()


# ============================================================================
# FASTAPI FIXTURES
# ============================================================================


@pytest.fixture
def booking_container():
    """Fresh global container with deterministic simulation."""
    reset_container()
    container = get_container(
        config={
            "availability_rate": 1.0,
            "race_loss_rate": 0.0,
            "fully_booked_rate": 0.0,
            "success_rate": 1.0,
            "random_seed": 7,
        }
    )
    yield container
    reset_container()


@pytest.fixture
def api_client(booking_container) -> Generator[TestClient, None, None]:
    """Create FastAPI test client (runs the application lifespan)."""
    from app.core.app_factory import create_app

    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def patient_headers() -> dict[str, str]:
    return {"Authorization": "Bearer demo-patient-token"}
