# ============================================================================
# Tests for the simulated collaborators
# ============================================================================
"""Unit tests for the in-memory implementations of the booking ports."""

import random
from datetime import date

import pytest

from app.core.domain.exceptions import IntegrationException
from app.domains.appointment_booking.domain.entities import AppointmentDraft
from app.domains.appointment_booking.domain.value_objects import NotificationPreferences
from app.domains.appointment_booking.infrastructure.simulated import (
    OTHER_PATIENT,
    UNAVAILABLE_REASON,
    InMemoryProviderDirectory,
    InMemoryUserDirectory,
    LoggingNotificationService,
    SimulatedAppointmentBackend,
    SimulatedSlotReservation,
)

MONDAY = date(2026, 10, 19)


class TestSimulatedSlotReservation:
    """Tests for SimulatedSlotReservation."""

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_rejects_invalid_rates(self, rate) -> None:
        with pytest.raises(ValueError, match="between 0 and 1"):
            SimulatedSlotReservation(availability_rate=rate)

    @pytest.mark.asyncio
    async def test_reserve_is_exclusive(self, open_reservation) -> None:
        """Should never grant a held slot to another draft."""
        assert await open_reservation.check_and_reserve("1", MONDAY, 10, "draft-a") is True
        assert await open_reservation.check_and_reserve("1", MONDAY, 10, "draft-a") is True
        assert await open_reservation.check_and_reserve("1", MONDAY, 10, "draft-b") is False
        assert open_reservation.holder_of("1", MONDAY, 10) == "draft-a"
        assert await open_reservation.is_slot_open("1", MONDAY, 10) is False

    @pytest.mark.asyncio
    async def test_release_only_by_holder(self, open_reservation) -> None:
        await open_reservation.check_and_reserve("1", MONDAY, 10, "draft-a")

        await open_reservation.release("1", MONDAY, 10, "draft-b")
        assert open_reservation.holder_of("1", MONDAY, 10) == "draft-a"

        await open_reservation.release("1", MONDAY, 10, "draft-a")
        assert open_reservation.holder_of("1", MONDAY, 10) is None
        assert await open_reservation.is_slot_open("1", MONDAY, 10) is True

    @pytest.mark.asyncio
    async def test_race_loss_marks_other_patient(self) -> None:
        reservation = SimulatedSlotReservation(availability_rate=1.0, race_loss_rate=1.0, fully_booked_rate=0.0)

        assert await reservation.check_and_reserve("1", MONDAY, 10, "draft-a") is False
        assert reservation.holder_of("1", MONDAY, 10) == OTHER_PATIENT

    @pytest.mark.asyncio
    async def test_fully_booked(self) -> None:
        reservation = SimulatedSlotReservation(fully_booked_rate=1.0)
        assert await reservation.is_day_fully_booked("1", MONDAY) is True

    @pytest.mark.asyncio
    async def test_seeded_runs_are_reproducible(self) -> None:
        async def draw(seed: int) -> list[bool]:
            reservation = SimulatedSlotReservation(rng=random.Random(seed))
            return [await reservation.is_slot_open("1", MONDAY, hour) for hour in range(9, 17)]

        assert await draw(42) == await draw(42)


class TestSimulatedAppointmentBackend:
    """Tests for SimulatedAppointmentBackend."""

    @pytest.mark.asyncio
    async def test_accepts_and_stores(self, accepting_backend) -> None:
        draft = AppointmentDraft.create()
        result = await accepting_backend.submit_appointment(draft)

        assert result.success is True
        assert result.confirmation_id.startswith("APT-")
        assert len(result.confirmation_id.rsplit("-", 1)[1]) == 8
        assert accepting_backend.get(result.confirmation_id)["id"] == draft.id
        assert accepting_backend.calls == 1

    @pytest.mark.asyncio
    async def test_rejects(self, rejecting_backend) -> None:
        result = await rejecting_backend.submit_appointment(AppointmentDraft.create())

        assert result.success is False
        assert result.reason == UNAVAILABLE_REASON
        assert result.confirmation_id is None

    def test_invalid_rate(self) -> None:
        with pytest.raises(ValueError):
            SimulatedAppointmentBackend(success_rate=2.0)


class TestInMemoryProviderDirectory:
    """Tests for InMemoryProviderDirectory."""

    @pytest.mark.asyncio
    async def test_lists_seed_data(self, directory) -> None:
        providers = await directory.list_providers()
        departments = await directory.list_departments()

        assert [p.id for p in providers] == ["1", "2", "3", "4", "5", "6", "7"]
        assert providers[0].availability == frozenset({"Mon", "Wed", "Fri"})
        assert providers[0].experience_years == 15
        assert [d.name for d in departments][:2] == ["Cardiology", "Neurology"]

    @pytest.mark.asyncio
    async def test_injected_failure(self, directory) -> None:
        directory.fail_next(1)
        with pytest.raises(IntegrationException):
            await directory.list_providers()
        assert len(await directory.list_providers()) == 7

    @pytest.mark.asyncio
    async def test_custom_records(self) -> None:
        directory = InMemoryProviderDirectory(
            providers=[{"id": "x", "name": "Dr. X", "specialty": "Oncology", "availability": "Sat"}],
            departments=[],
        )
        providers = await directory.list_providers()
        assert providers[0].availability == frozenset({"Sat"})
        assert await directory.list_departments() == []


class TestIdentityAdapters:
    """Tests for InMemoryUserDirectory and InMemoryIdentityProvider."""

    @pytest.mark.asyncio
    async def test_known_patient_token(self) -> None:
        identity = InMemoryUserDirectory().identity_for("demo-patient-token")

        assert await identity.is_authenticated() is True
        user = await identity.get_current_user()
        assert user.is_patient is True
        assert user.to_patient_info().is_valid() is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "unknown-token"])
    async def test_unknown_token_is_anonymous(self, token) -> None:
        identity = InMemoryUserDirectory().identity_for(token)
        assert await identity.is_authenticated() is False
        assert await identity.get_current_user() is None

    def test_doctor_is_not_patient(self) -> None:
        user = InMemoryUserDirectory().resolve("demo-doctor-token")
        assert user is not None
        assert user.is_patient is False


class TestLoggingNotificationService:
    """Tests for LoggingNotificationService."""

    @pytest.mark.asyncio
    async def test_records_each_channel(self, complete_patient_info) -> None:
        service = LoggingNotificationService()
        draft = AppointmentDraft.create()
        draft.patient_info = complete_patient_info

        await service.notify(NotificationPreferences(email=True, sms=True), draft)

        assert service.sent == [("email", draft.id), ("sms", draft.id)]
