# ============================================================================
# SCOPE: WORKFLOW LAYER (Appointment Booking)
# Description: Workflow exports.
# ============================================================================
"""Booking workflow: controller, steps and redirect countdown."""

from .config import WorkflowConfig
from .controller import BookingController
from .countdown import RedirectCountdown

__all__ = ["BookingController", "RedirectCountdown", "WorkflowConfig"]
