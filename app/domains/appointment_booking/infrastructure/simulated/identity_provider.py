# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: In-memory identity adapters.
# ============================================================================
"""In-memory Identity Provider.

``InMemoryUserDirectory`` maps bearer tokens to profiles;
``InMemoryIdentityProvider`` exposes one resolved session through the
IIdentityProvider port.
"""

import logging
from typing import Any

from ...application.dto.booking_dtos import CurrentUser
from .seed_data import DEMO_USERS

logger = logging.getLogger(__name__)


class InMemoryIdentityProvider:
    """Identity port for a single session."""

    def __init__(self, user: CurrentUser | None = None):
        self._user = user

    async def is_authenticated(self) -> bool:
        return self._user is not None

    async def get_current_user(self) -> CurrentUser | None:
        return self._user


class InMemoryUserDirectory:
    """Token to profile lookup."""

    def __init__(self, users: dict[str, dict[str, Any]] | None = None):
        source = DEMO_USERS if users is None else users
        self._users = {token: CurrentUser.from_external_data(data) for token, data in source.items()}

    def resolve(self, token: str | None) -> CurrentUser | None:
        if not token:
            return None
        user = self._users.get(token)
        if user is None:
            logger.info("Unknown session token")
        return user

    def identity_for(self, token: str | None) -> InMemoryIdentityProvider:
        return InMemoryIdentityProvider(self.resolve(token))
