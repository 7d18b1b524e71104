# Domain Services
from .provider_filter import count_by_department, filter_providers, provider_matches, unique_specialties
from .slot_schedule import daily_hours, suggest_alternative_dates, upcoming_dates

__all__ = [
    "count_by_department",
    "daily_hours",
    "filter_providers",
    "provider_matches",
    "suggest_alternative_dates",
    "unique_specialties",
    "upcoming_dates",
]
