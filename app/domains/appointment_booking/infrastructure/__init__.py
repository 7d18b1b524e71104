"""Infrastructure Layer - Appointment Booking."""

from .session_store import BookingSession, BookingSessionStore

__all__ = ["BookingSession", "BookingSessionStore"]
