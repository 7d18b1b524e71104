"""Provider and Department Entities.

Doctors eligible to be booked and the departments used to group them.
Both are immutable once fetched from the provider directory.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

WEEKDAY_ABBREVIATIONS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def weekday_abbreviation(day: date) -> str:
    """Locale independent short weekday name ("Mon".."Sun")."""
    return WEEKDAY_ABBREVIATIONS[day.weekday()]


def parse_availability(value: str | list[str] | tuple[str, ...] | frozenset[str] | None) -> frozenset[str]:
    """Parse "Mon, Wed, Fri" (or a list of names) into a set of abbreviations.

    Raises:
        ValueError: If a day name is not recognized.
    """
    if not value:
        return frozenset()
    parts = value.split(",") if isinstance(value, str) else list(value)

    days: set[str] = set()
    for part in parts:
        name = part.strip()[:3].capitalize()
        if not name:
            continue
        if name not in WEEKDAY_ABBREVIATIONS:
            raise ValueError(f"Unknown weekday in availability: {part!r}")
        days.add(name)
    return frozenset(days)


@dataclass(frozen=True)
class Provider:
    """Doctor that patients can book."""

    id: str
    name: str
    specialty: str
    department: str = ""
    availability: frozenset[str] = field(default_factory=frozenset)
    rating: float = 0.0
    experience_years: int = 0
    avatar_url: str = ""

    def is_available_on(self, day: date) -> bool:
        """Does the provider see patients on this weekday?"""
        return weekday_abbreviation(day) in self.availability

    @property
    def availability_display(self) -> str:
        """Availability in calendar order, e.g. "Mon, Wed, Fri"."""
        return ", ".join(d for d in WEEKDAY_ABBREVIATIONS if d in self.availability)

    @classmethod
    def from_external_data(cls, data: dict[str, Any]) -> "Provider":
        """Factory method to build a provider from directory data.

        Accepts both snake_case and camelCase keys. Experience may be an
        integer or a string such as "15 years".

        Args:
            data: Provider record from the directory service.

        Returns:
            New Provider instance.
        """
        experience = data.get("experience_years", data.get("experience", 0))
        if isinstance(experience, str):
            match = re.search(r"\d+", experience)
            experience = int(match.group()) if match else 0

        specialty = str(data.get("specialty", ""))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            specialty=specialty,
            department=str(data.get("department") or specialty),
            availability=parse_availability(data.get("availability")),
            rating=float(data.get("rating", 0.0)),
            experience_years=int(experience),
            avatar_url=str(data.get("avatar_url", data.get("avatarUrl", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "specialty": self.specialty,
            "department": self.department,
            "availability": self.availability_display,
            "rating": self.rating,
            "experience_years": self.experience_years,
            "avatar_url": self.avatar_url,
        }


@dataclass(frozen=True)
class Department:
    """Grouping of providers by specialty area."""

    id: str
    name: str
    description: str = ""
    icon_class: str = ""

    def provider_count(self, providers: list[Provider]) -> int:
        """Number of providers in this department (derived, not stored)."""
        return sum(1 for provider in providers if provider.department == self.name)

    @classmethod
    def from_external_data(cls, data: dict[str, Any]) -> "Department":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            icon_class=str(data.get("icon_class", data.get("iconClass", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon_class": self.icon_class,
        }
