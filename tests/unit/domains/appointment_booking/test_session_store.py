# ============================================================================
# Tests for BookingSessionStore
# ============================================================================
"""Unit tests for the in-memory booking session registry."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.domain.exceptions import EntityNotFoundException
from app.domains.appointment_booking.domain.value_objects import BookingState, DraftStatus, ExitReason
from app.domains.appointment_booking.infrastructure import BookingSessionStore

MONDAY = date(2026, 10, 19)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> BookingSessionStore:
    return BookingSessionStore(ttl_seconds=60, cleanup_interval=0.01, clock=clock)


@pytest.fixture
def controller() -> MagicMock:
    mock = MagicMock(can_abandon=False)
    mock.close = AsyncMock()
    return mock


class TestSessionLookup:
    """Tests for create() and get()."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, store, controller, clock) -> None:
        session = store.create("owner-a", controller)
        assert len(store) == 1

        clock.now += 30
        found = await store.get(session.session_id, "owner-a")

        assert found is session
        assert found.last_accessed == clock.now
        assert found.to_dict()["owner"] == "owner-a"

    @pytest.mark.asyncio
    async def test_unknown_session(self, store) -> None:
        with pytest.raises(EntityNotFoundException):
            await store.get("missing", "owner-a")

    @pytest.mark.asyncio
    async def test_other_owner_cannot_see_session(self, store, controller) -> None:
        """Should answer not-found rather than reveal the session exists."""
        session = store.create("owner-a", controller)
        with pytest.raises(EntityNotFoundException):
            await store.get(session.session_id, "owner-b")
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_access_extends_lifetime(self, store, controller, clock) -> None:
        session = store.create("owner-a", controller)
        for _ in range(3):
            clock.now += 45
            await store.get(session.session_id, "owner-a")
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_expired_session_is_closed(self, store, controller, clock) -> None:
        session = store.create("owner-a", controller)
        clock.now += 61

        with pytest.raises(EntityNotFoundException):
            await store.get(session.session_id, "owner-a")
        controller.close.assert_awaited_once()
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_no_ttl_never_expires(self, controller, clock) -> None:
        store = BookingSessionStore(ttl_seconds=None, clock=clock)
        session = store.create("owner-a", controller)
        clock.now += 10**6
        assert await store.get(session.session_id, "owner-a") is session


class TestSessionCleanup:
    """Tests for close(), purge_expired() and the cleanup loop."""

    @pytest.mark.asyncio
    async def test_close(self, store, controller) -> None:
        session = store.create("owner-a", controller)
        assert await store.close(session.session_id) is True
        assert await store.close(session.session_id) is False
        controller.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_purge_expired(self, store, clock) -> None:
        old = MagicMock(close=AsyncMock(), can_abandon=False)
        fresh = MagicMock(close=AsyncMock(), can_abandon=False)
        store.create("owner-a", old)
        clock.now += 50
        store.create("owner-b", fresh)
        clock.now += 20

        assert await store.purge_expired() == 1
        assert len(store) == 1
        old.close.assert_awaited_once()
        fresh.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_all(self, store) -> None:
        controllers = [MagicMock(close=AsyncMock(), can_abandon=False) for _ in range(3)]
        for controller in controllers:
            store.create("owner-a", controller)

        await store.close_all()

        assert len(store) == 0
        for controller in controllers:
            controller.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cleanup_loop(self, store, controller, clock) -> None:
        store.create("owner-a", controller)
        clock.now += 120

        store.start_cleanup()
        await asyncio.sleep(0.1)
        await store.stop_cleanup()

        assert len(store) == 0
        controller.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, store) -> None:
        await store.stop_cleanup()


class TestHeldSlotRelease:
    """Closing a session gives an unconfirmed draft's slot back."""

    @pytest.mark.asyncio
    async def test_expired_session_releases_held_slot(
        self, store, clock, make_controller, fill_slot_step, open_reservation
    ) -> None:
        """Should abandon the draft and free its slot when the session expires."""
        controller = make_controller()
        await fill_slot_step(controller)
        assert open_reservation.holder_of("1", MONDAY, 10) == controller.draft.id

        store.create("owner-a", controller)
        clock.now += 120

        assert await store.purge_expired() == 1
        assert open_reservation.holder_of("1", MONDAY, 10) is None
        assert await open_reservation.check_and_reserve("1", MONDAY, 10, "other-patient") is True
        assert controller.state == BookingState.EXITED
        assert controller.exit_reason == ExitReason.ABANDONED
        assert controller.draft.status == DraftStatus.ABANDONED

    @pytest.mark.asyncio
    async def test_close_all_releases_held_slots(
        self, store, make_controller, fill_slot_step, open_reservation
    ) -> None:
        controller = make_controller()
        await fill_slot_step(controller, hour=14)
        store.create("owner-a", controller)

        await store.close_all()

        assert open_reservation.holder_of("1", MONDAY, 14) is None

    @pytest.mark.asyncio
    async def test_confirmed_appointment_keeps_its_slot(
        self, store, clock, make_controller, fill_slot_step, open_reservation
    ) -> None:
        """Should leave a confirmed booking untouched when its session expires."""
        controller = make_controller()
        await fill_slot_step(controller)
        assert await controller.advance() is True
        assert controller.state == BookingState.CONFIRMED

        store.create("owner-a", controller)
        clock.now += 120
        await store.purge_expired()

        assert controller.state == BookingState.CONFIRMED
        assert controller.draft.status == DraftStatus.CONFIRMED
        assert open_reservation.holder_of("1", MONDAY, 10) == controller.draft.id
