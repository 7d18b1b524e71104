"""
Tests for the dependency injection container.
"""

import pytest

from app.core.container import DependencyContainer, get_container, reset_container
from app.domains.appointment_booking.domain.value_objects import BookingState
from app.domains.appointment_booking.workflow import BookingController


@pytest.fixture(autouse=True)
def fresh_container():
    reset_container()
    yield
    reset_container()


class TestDependencyContainer:
    """Tests for DependencyContainer."""

    def test_singletons_are_shared(self) -> None:
        container = DependencyContainer()
        assert container.get_slot_reservation() is container.get_slot_reservation()
        assert container.get_session_store() is container.get_session_store()
        assert container.get_provider_directory() is container.get_provider_directory()

    def test_config_overrides_settings(self) -> None:
        container = DependencyContainer({"success_rate": 0.0, "session_ttl_seconds": 5})
        assert container.get_session_store().ttl_seconds == 5
        assert container.get_config()["success_rate"] == 0.0

    def test_workflow_overrides(self) -> None:
        container = DependencyContainer({"workflow": {"max_suggestions": 1}})
        config = container.get_workflow_config()
        assert config.max_suggestions == 1
        assert config.redirect_seconds == 0

    def test_controllers_share_reservation_ledger(self) -> None:
        container = DependencyContainer()
        first = container.create_booking_controller_for_token("demo-patient-token")
        second = container.create_booking_controller_for_token("demo-patient-token")

        assert isinstance(first, BookingController)
        assert first is not second
        assert first.draft.id != second.draft.id

    @pytest.mark.asyncio
    async def test_controller_resumes_draft(self, patient_identity) -> None:
        container = DependencyContainer()
        first = container.create_booking_controller(patient_identity)
        second = container.create_booking_controller(patient_identity, draft=first.draft)

        assert second.draft is first.draft
        assert await second.start() == BookingState.STEP1_VERIFY

    @pytest.mark.asyncio
    async def test_controller_for_token_verifies_patient(self) -> None:
        controller = DependencyContainer().create_booking_controller_for_token("demo-patient-token")
        assert await controller.start() == BookingState.STEP1_VERIFY
        assert controller.verification.is_valid is True


class TestGlobalContainer:
    """Tests for get_container() and reset_container()."""

    def test_get_container_is_singleton(self) -> None:
        assert get_container() is get_container()

    def test_config_ignored_after_first_call(self) -> None:
        first = get_container({"success_rate": 0.5})
        second = get_container({"success_rate": 0.1})
        assert second is first
        assert second.config["success_rate"] == 0.5

    def test_reset(self) -> None:
        first = get_container()
        reset_container()
        assert get_container() is not first
