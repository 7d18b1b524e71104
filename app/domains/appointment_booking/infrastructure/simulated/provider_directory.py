# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Appointment Booking)
# Description: In-memory provider directory.
# ============================================================================
"""In-memory Provider Directory.

Implements IProviderDirectory over a fixed list of doctors and departments.
A failure can be injected to exercise the retryable load error.
"""

import logging
from collections.abc import Iterable
from typing import Any

from app.core.domain.exceptions import IntegrationException

from ...domain.entities.provider import Department, Provider
from .seed_data import DEPARTMENTS, PROVIDERS

logger = logging.getLogger(__name__)


class InMemoryProviderDirectory:
    """Provider directory backed by in-memory records."""

    def __init__(
        self,
        providers: Iterable[dict[str, Any]] | None = None,
        departments: Iterable[dict[str, Any]] | None = None,
    ):
        self._providers = [Provider.from_external_data(p) for p in (providers if providers is not None else PROVIDERS)]
        self._departments = [
            Department.from_external_data(d) for d in (departments if departments is not None else DEPARTMENTS)
        ]
        self._failures_remaining = 0

    def fail_next(self, times: int = 1) -> None:
        """Make the next ``times`` calls raise IntegrationException."""
        self._failures_remaining = times

    def _check_failure(self, operation: str) -> None:
        if self._failures_remaining > 0:
            self._failures_remaining -= 1
            logger.warning(f"Simulated directory failure on {operation}")
            raise IntegrationException("provider_directory", f"Provider directory unavailable ({operation})")

    async def list_providers(self) -> list[Provider]:
        self._check_failure("list_providers")
        return list(self._providers)

    async def list_departments(self) -> list[Department]:
        self._check_failure("list_departments")
        return list(self._departments)
