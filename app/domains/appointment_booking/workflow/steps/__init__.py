# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Workflow step exports.
# ============================================================================
"""Booking workflow steps.

Each step owns its form state for the whole workflow, so navigating back
and forward never loses input. Only the controller writes the draft.
"""

from .base import BaseStep
from .confirmation import ConfirmationPresenter
from .identity_verification import IdentityVerificationStep, VerificationStatus
from .modification import ModificationHandler
from .provider_selection import ProviderSelectionStep, SelectionMode
from .slot_selection import SlotSelectionStep

__all__ = [
    "BaseStep",
    "ConfirmationPresenter",
    "IdentityVerificationStep",
    "ModificationHandler",
    "ProviderSelectionStep",
    "SelectionMode",
    "SlotSelectionStep",
    "VerificationStatus",
]
