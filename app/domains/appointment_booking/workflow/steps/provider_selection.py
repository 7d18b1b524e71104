# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Step 2 - choose a doctor directly or through a department.
# ============================================================================
"""Provider Selection Step.

Two mutually exclusive modes:

- DIRECT: search by name and filter by specialty.
- BY_DEPARTMENT: pick a department, which narrows the specialty filter
  and switches back to DIRECT automatically.

Picking a doctor only stores a pending selection; the controller commits
it to the draft on advance.
"""

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from app.core.domain.exceptions import EntityNotFoundException

from ...domain.entities.appointment_draft import AppointmentDraft, DraftUpdate
from ...domain.entities.provider import Department, Provider
from ...domain.services.provider_filter import count_by_department, filter_providers, unique_specialties
from .base import BaseStep, UpdateRequester

if TYPE_CHECKING:
    from ...application.ports.provider_directory_port import IProviderDirectory

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load doctors and departments. Please try again."


class SelectionMode(str, Enum):
    DIRECT = "direct"
    BY_DEPARTMENT = "by_department"


class ProviderSelectionStep(BaseStep):
    """Pick the provider for the appointment."""

    EDITABLE_FIELDS = frozenset({"selected_provider"})

    def __init__(
        self,
        directory: "IProviderDirectory",
        draft: AppointmentDraft,
        request_update: UpdateRequester | None = None,
    ) -> None:
        super().__init__(draft, request_update)
        self._directory = directory
        self._providers: list[Provider] = []
        self._departments: list[Department] = []
        self._loaded = False
        self._error: str | None = None

        self._mode = SelectionMode.DIRECT
        self._search = ""
        self._specialty = ""
        self._department: Department | None = None
        self._pending: Provider | None = None

    # ---------------------------------------------------------------------
    # Loading
    # ---------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def providers(self) -> list[Provider]:
        return list(self._providers)

    @property
    def departments(self) -> list[Department]:
        return list(self._departments)

    async def enter(self) -> None:
        await super().enter()
        if self._pending is None and self.draft.selected_provider is not None:
            self._pending = self.draft.selected_provider
        if not self._loaded and self._error is None:
            await self.load()

    async def load(self) -> bool:
        """Fetch providers and departments concurrently.

        Returns:
            True on success. On failure a retryable error is set and the
            previously loaded lists (if any) are kept.
        """
        try:
            providers, departments = await asyncio.gather(
                self._directory.list_providers(),
                self._directory.list_departments(),
            )
        except Exception as e:
            logger.error(f"Error fetching doctors and departments: {e}", exc_info=True)
            self._error = LOAD_ERROR_MESSAGE
            return False

        self._providers = list(providers)
        self._departments = list(departments)
        self._loaded = True
        self._error = None
        logger.info(f"Loaded {len(self._providers)} providers and {len(self._departments)} departments")
        return True

    async def retry(self) -> bool:
        """Manual retry: re-issue both fetches."""
        self._error = None
        return await self.load()

    # ---------------------------------------------------------------------
    # Filters
    # ---------------------------------------------------------------------

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def search(self) -> str:
        return self._search

    @property
    def specialty(self) -> str:
        return self._specialty

    @property
    def department(self) -> Department | None:
        return self._department

    @property
    def pending(self) -> Provider | None:
        return self._pending

    @property
    def filtered_providers(self) -> list[Provider]:
        return filter_providers(self._providers, self._search, self._specialty, self._department)

    @property
    def specialties(self) -> list[str]:
        return unique_specialties(self._providers)

    @property
    def department_counts(self) -> dict[str, int]:
        return count_by_department(self._departments, self._providers)

    def set_search(self, text: str) -> None:
        self._search = text

    def set_specialty(self, specialty: str) -> None:
        self._specialty = specialty

    def switch_mode(self, mode: SelectionMode) -> None:
        """Change selection mode.

        Clears the department filter (and, for DIRECT, the specialty it
        implied). The pending provider is kept.
        """
        if mode == self._mode:
            return
        self._mode = mode
        self._department = None
        if mode == SelectionMode.DIRECT:
            self._specialty = ""

    def select_department(self, department_id: str) -> Department:
        """Filter by department and go back to DIRECT mode.

        Raises:
            EntityNotFoundException: If the department is unknown.
        """
        department = next((d for d in self._departments if d.id == department_id), None)
        if department is None:
            raise EntityNotFoundException("Department", department_id)
        self._department = department
        self._specialty = department.name
        self._mode = SelectionMode.DIRECT
        return department

    def clear_department(self) -> None:
        self._department = None

    def choose(self, provider_id: str) -> Provider:
        """Store a pending provider selection.

        Raises:
            EntityNotFoundException: If the provider is not in the directory.
        """
        provider = next((p for p in self._providers if p.id == provider_id), None)
        if provider is None:
            raise EntityNotFoundException("Provider", provider_id)
        self._pending = provider
        logger.debug(f"Pending provider for draft {self.draft.id}: {provider.id}")
        return provider

    def complete(self) -> DraftUpdate | None:
        if self._pending is None:
            return None
        return DraftUpdate(selected_provider=self._pending)

    def to_view(self) -> dict[str, Any]:
        counts = self.department_counts
        return {
            "step": self.step_name,
            "loaded": self._loaded,
            "error": self._error,
            "mode": self._mode.value,
            "search": self._search,
            "specialty": self._specialty,
            "department": self._department.to_dict() if self._department else None,
            "specialties": self.specialties,
            "departments": [{**d.to_dict(), "provider_count": counts.get(d.id, 0)} for d in self._departments],
            "providers": [p.to_dict() for p in self.filtered_providers],
            "pending_provider_id": self._pending.id if self._pending else None,
            "can_advance": self._pending is not None,
        }
