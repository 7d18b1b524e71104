# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Identity/session port.
# ============================================================================
"""Identity Port.

Read-only access to the authenticated actor.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..dto.booking_dtos import CurrentUser


@runtime_checkable
class IIdentityProvider(Protocol):
    """Interface to the identity/session service.

    Implementations: InMemoryIdentityProvider
    """

    async def is_authenticated(self) -> bool:
        """Is there an authenticated session?"""
        ...

    async def get_current_user(self) -> "CurrentUser | None":
        """Get the authenticated actor's profile.

        Returns:
            The profile, or None when the session has no user attached.
        """
        ...
