"""
Base Value Object Classes

Immutable domain primitives without identity, compared by value.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Marker base for value objects.

    Subclasses are frozen dataclasses; "changing" one means building a new
    instance (``dataclasses.replace``).
    """


class StatusEnum(str, Enum):
    """String enum whose values are shown to users as-is."""

    @classmethod
    def values(cls) -> list[str]:
        """All values in declaration order (for pickers)."""
        return [e.value for e in cls]
