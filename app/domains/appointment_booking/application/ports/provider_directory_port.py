# ============================================================================
# SCOPE: APPLICATION LAYER (Appointment Booking)
# Description: Provider directory port.
# ============================================================================
"""Provider Directory Port.

Source of bookable doctors and departments. No pagination: callers load
both lists once per workflow entry.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.provider import Department, Provider


@runtime_checkable
class IProviderDirectory(Protocol):
    """Interface to the provider directory service.

    Implementations: InMemoryProviderDirectory
    """

    async def list_providers(self) -> "list[Provider]":
        """List all bookable providers.

        Raises:
            IntegrationException: If the directory cannot be reached.
        """
        ...

    async def list_departments(self) -> "list[Department]":
        """List all departments.

        Raises:
            IntegrationException: If the directory cannot be reached.
        """
        ...
