# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Base class for workflow steps.
# ============================================================================
"""Base Step Class.

Abstract base class for the views driven by the booking controller.

Steps read the shared draft but never write it. They either return a
``DraftUpdate`` from ``complete()`` (applied by the controller on advance)
or ask the controller to apply one through the ``request_update`` callback
they were handed. The controller enforces that a step only writes the
fields listed in ``EDITABLE_FIELDS``.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from app.core.domain.exceptions import InvalidOperationException

from ...domain.entities.appointment_draft import AppointmentDraft, DraftUpdate

logger = logging.getLogger(__name__)

UpdateRequester = Callable[[DraftUpdate], list[str]]


class BaseStep(ABC):
    """Base class for workflow steps.

    Subclasses implement ``to_view()`` and usually ``enter()`` and
    ``complete()``.
    """

    EDITABLE_FIELDS: frozenset[str] = frozenset()

    def __init__(self, draft: AppointmentDraft, request_update: UpdateRequester | None = None) -> None:
        """Initialize step.

        Args:
            draft: Shared draft (read-only for the step).
            request_update: Controller callback that applies draft updates.
        """
        self._draft = draft
        self._request_update_callback = request_update

    @property
    def draft(self) -> AppointmentDraft:
        return self._draft

    @property
    def step_name(self) -> str:
        """Step name in snake_case, without the 'Step' suffix."""
        name = self.__class__.__name__
        if name.endswith("Step"):
            name = name[:-4]
        return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()

    def attach(self, request_update: UpdateRequester) -> None:
        """Hand the step the controller callback used to write the draft."""
        self._request_update_callback = request_update

    def _request_update(self, update: DraftUpdate) -> list[str]:
        """Ask the controller to apply ``update`` to the draft.

        Returns:
            Names of the fields that changed.

        Raises:
            InvalidOperationException: If the step was not handed a callback.
        """
        if self._request_update_callback is None:
            raise InvalidOperationException("request_update", self.step_name, "Step is not attached to a controller")
        return self._request_update_callback(update)

    async def enter(self) -> None:
        """Called by the controller every time the step becomes active."""
        logger.debug(f"Entering step: {self.step_name}")

    def complete(self) -> DraftUpdate | None:
        """Return the update to commit on advance, or None if not valid yet."""
        return None

    @abstractmethod
    def to_view(self) -> dict[str, Any]:
        """Plain dictionary describing what the step currently shows."""
        ...
