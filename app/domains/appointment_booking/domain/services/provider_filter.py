"""Provider filtering.

Pure functions over the provider list: identical inputs always produce
identical outputs and nothing is mutated.
"""

from collections.abc import Sequence

from ..entities.provider import Department, Provider


def provider_matches(
    provider: Provider,
    search: str = "",
    specialty: str = "",
    department: Department | None = None,
) -> bool:
    """Check one provider against the active filters.

    Args:
        provider: Candidate provider.
        search: Case-insensitive substring of the provider name.
        specialty: Exact specialty, or "" for any.
        department: Department whose name must match the provider's, or None.
    """
    if search and search.lower() not in provider.name.lower():
        return False
    if specialty and provider.specialty != specialty:
        return False
    if department is not None and provider.department != department.name:
        return False
    return True


def filter_providers(
    providers: Sequence[Provider],
    search: str = "",
    specialty: str = "",
    department: Department | None = None,
) -> list[Provider]:
    """Filter providers, keeping directory order."""
    return [p for p in providers if provider_matches(p, search, specialty, department)]


def unique_specialties(providers: Sequence[Provider]) -> list[str]:
    """Specialties in order of first appearance."""
    seen: dict[str, None] = {}
    for provider in providers:
        seen.setdefault(provider.specialty, None)
    return list(seen)


def count_by_department(
    departments: Sequence[Department],
    providers: Sequence[Provider],
) -> dict[str, int]:
    """Provider count per department id."""
    return {department.id: department.provider_count(list(providers)) for department in departments}
