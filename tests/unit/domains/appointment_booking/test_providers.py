# ============================================================================
# Tests for provider entities and filtering
# ============================================================================
"""Unit tests for Provider, Department and the provider filter functions."""

from datetime import date

import pytest

from app.domains.appointment_booking.domain.entities import (
    Department,
    Provider,
    parse_availability,
    weekday_abbreviation,
)
from app.domains.appointment_booking.domain.services import (
    count_by_department,
    filter_providers,
    provider_matches,
    unique_specialties,
)
from app.domains.appointment_booking.infrastructure.simulated.seed_data import DEPARTMENTS, PROVIDERS


@pytest.fixture
def providers() -> list[Provider]:
    return [Provider.from_external_data(p) for p in PROVIDERS]


@pytest.fixture
def departments() -> list[Department]:
    return [Department.from_external_data(d) for d in DEPARTMENTS]


class TestAvailabilityParsing:
    """Tests for weekday parsing helpers."""

    def test_parses_comma_separated_days(self) -> None:
        """Should parse the directory's "Mon, Wed, Fri" format."""
        assert parse_availability("Mon, Wed, Fri") == frozenset({"Mon", "Wed", "Fri"})

    def test_accepts_full_names_and_lists(self) -> None:
        """Should normalize full day names given as a list."""
        assert parse_availability(["monday", "Thursday"]) == frozenset({"Mon", "Thu"})

    def test_empty_value(self) -> None:
        """Should return an empty set for missing availability."""
        assert parse_availability(None) == frozenset()
        assert parse_availability("") == frozenset()

    def test_unknown_day_raises(self) -> None:
        """Should reject names that are not weekdays."""
        with pytest.raises(ValueError):
            parse_availability("Mon, Someday")

    def test_weekday_abbreviation(self) -> None:
        """Should not depend on the locale."""
        assert weekday_abbreviation(date(2026, 10, 19)) == "Mon"
        assert weekday_abbreviation(date(2026, 10, 25)) == "Sun"


class TestProviderEntity:
    """Tests for Provider."""

    def test_from_external_data_camel_case(self, providers) -> None:
        """Should map camelCase directory records."""
        minh = providers[0]
        assert minh.id == "1"
        assert minh.experience_years == 15
        assert minh.avatar_url.endswith("women/44.jpg")
        assert minh.availability == frozenset({"Mon", "Wed", "Fri"})

    def test_department_defaults_to_specialty(self) -> None:
        """Should fall back to the specialty when no department is given."""
        provider = Provider.from_external_data({"id": 9, "name": "Dr. X", "specialty": "Oncology"})
        assert provider.id == "9"
        assert provider.department == "Oncology"
        assert provider.availability == frozenset()

    def test_is_available_on(self, providers) -> None:
        """Should check the weekday against availability."""
        minh = providers[0]
        assert minh.is_available_on(date(2026, 10, 19)) is True  # Monday
        assert minh.is_available_on(date(2026, 10, 20)) is False  # Tuesday

    def test_availability_display_in_calendar_order(self) -> None:
        """Should render days Monday first."""
        provider = Provider(id="x", name="Dr. X", specialty="Y", availability=frozenset({"Fri", "Mon", "Wed"}))
        assert provider.availability_display == "Mon, Wed, Fri"


class TestProviderFilter:
    """Tests for the pure filter functions."""

    def test_no_filters_returns_all_in_order(self, providers) -> None:
        """Should keep directory order when no filter is active."""
        assert [p.id for p in filter_providers(providers)] == ["1", "2", "3", "4", "5", "6", "7"]

    def test_search_is_case_insensitive_on_name(self, providers) -> None:
        """Should match a case-insensitive name substring."""
        result = filter_providers(providers, search="MINH")
        assert [p.id for p in result] == ["1", "5", "7"]

    def test_specialty_is_exact(self, providers) -> None:
        """Should match the specialty exactly."""
        assert [p.id for p in filter_providers(providers, specialty="Pediatrics")] == ["4", "5"]
        assert filter_providers(providers, specialty="pediatrics") == []

    def test_department_filter(self, providers, departments) -> None:
        """Should keep providers whose department matches by name."""
        cardiology = next(d for d in departments if d.name == "Cardiology")
        assert [p.id for p in filter_providers(providers, department=cardiology)] == ["1", "2"]

    def test_filters_combine(self, providers, departments) -> None:
        """Should require every active filter to match."""
        cardiology = next(d for d in departments if d.name == "Cardiology")
        result = filter_providers(providers, search="dr. tr", specialty="Cardiology", department=cardiology)
        assert [p.id for p in result] == ["2"]

    @pytest.mark.parametrize(
        "search,specialty,department_index",
        [("", "", None), ("minh", "", None), ("", "Neurology", None), ("dr", "Cardiology", 0), ("zzz", "", 2)],
    )
    def test_filtering_is_pure(self, providers, departments, search, specialty, department_index) -> None:
        """Should return identical results for identical inputs without mutating them."""
        department = departments[department_index] if department_index is not None else None
        snapshot = list(providers)

        first = filter_providers(providers, search, specialty, department)
        second = filter_providers(providers, search, specialty, department)

        assert first == second
        assert providers == snapshot
        assert all(provider_matches(p, search, specialty, department) for p in first)

    def test_unique_specialties_first_appearance(self, providers) -> None:
        """Should list each specialty once in order of first appearance."""
        assert unique_specialties(providers) == [
            "Cardiology",
            "Neurology",
            "Pediatrics",
            "Orthopedics",
            "Dermatology",
        ]

    def test_count_by_department(self, providers, departments) -> None:
        """Should derive provider counts per department id."""
        assert count_by_department(departments, providers) == {"1": 2, "2": 1, "3": 2, "4": 1, "5": 1}
