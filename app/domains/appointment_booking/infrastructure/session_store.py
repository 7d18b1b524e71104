# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: In-memory registry of live booking sessions with idle expiry.
# ============================================================================
"""
Booking Session Store

In-memory registry of live booking workflows, keyed by session id.
Each session owns one BookingController and a lock that serializes
requests against it. Closing a session abandons an unconfirmed draft so
the slot it holds goes back to other patients.
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from app.core.domain import EntityNotFoundException
from app.domains.appointment_booking.workflow import BookingController

logger = logging.getLogger(__name__)


@dataclass
class BookingSession:
    """A single booking workflow bound to the caller that created it."""

    session_id: str
    owner: str
    controller: BookingController
    created_at: float = field(default_factory=time.time)
    last_accessed: float = field(default_factory=time.time)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def touch(self, now: float) -> None:
        self.last_accessed = now

    def is_expired(self, now: float, ttl: float | None) -> bool:
        if not ttl:
            return False
        return now - self.last_accessed > ttl

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "owner": self.owner,
            "created_at": self.created_at,
            "last_accessed": self.last_accessed,
        }


class BookingSessionStore:
    """
    Session registry with idle expiration.

    Expired sessions are dropped lazily on access, or by the optional
    background cleanup loop started from the application lifespan.
    """

    def __init__(
        self,
        ttl_seconds: float | None = 1800,
        cleanup_interval: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize session store.

        Args:
            ttl_seconds: Idle lifetime of a session (None or 0 = never expires)
            cleanup_interval: Interval for the background cleanup loop
            clock: Time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._sessions: dict[str, BookingSession] = {}
        self._cleanup_task: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, owner: str, controller: BookingController) -> BookingSession:
        """Register a controller under a fresh session id."""
        now = self._clock()
        session = BookingSession(
            session_id=str(uuid.uuid4()),
            owner=owner,
            controller=controller,
            created_at=now,
            last_accessed=now,
        )
        self._sessions[session.session_id] = session
        logger.info(f"Booking session {session.session_id} created for owner {owner}")
        return session

    async def get(self, session_id: str, owner: str) -> BookingSession:
        """
        Look up a live session owned by the given caller.

        Raises:
            EntityNotFoundException: If the session is unknown, expired, or
                belongs to another caller.
        """
        session = self._sessions.get(session_id)
        now = self._clock()

        if session is not None and session.is_expired(now, self.ttl_seconds):
            logger.info(f"Booking session {session_id} expired")
            await self.close(session_id)
            session = None

        if session is None or session.owner != owner:
            raise EntityNotFoundException("BookingSession", session_id)

        session.touch(now)
        return session

    async def close(self, session_id: str) -> bool:
        """
        Drop a session and stop its background work.

        An unconfirmed draft is abandoned first, releasing its held slot.
        A confirmed appointment is kept.

        Returns:
            True if the session existed
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.controller.can_abandon:
            await session.controller.abandon()
        await session.controller.close()
        logger.debug(f"Booking session {session_id} closed")
        return True

    async def purge_expired(self) -> int:
        """Close every expired session. Returns how many were closed."""
        now = self._clock()
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now, self.ttl_seconds)]
        for session_id in expired:
            await self.close(session_id)
        if expired:
            logger.info(f"Purged {len(expired)} expired booking sessions")
        return len(expired)

    async def close_all(self) -> None:
        """Close every session (application shutdown)."""
        for session_id in list(self._sessions):
            await self.close(session_id)

    def start_cleanup(self) -> None:
        """Start automatic cleanup task."""
        if self._cleanup_task is None and self.ttl_seconds:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop_cleanup(self) -> None:
        """Stop automatic cleanup task."""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.cleanup_interval)
                await self.purge_expired()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Booking session cleanup error: {e}")
