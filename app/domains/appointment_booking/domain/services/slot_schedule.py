"""Slot schedule calculations.

Date and hour arithmetic behind slot generation. No I/O and no randomness;
occupancy is decided by the reservation port.
"""

from datetime import date, timedelta

from ..entities.provider import Provider


def daily_hours(start_hour: int = 9, end_hour: int = 16, lunch_hour: int | None = 12) -> list[int]:
    """Bookable hours in [start_hour, end_hour], skipping lunch.

    >>> daily_hours()
    [9, 10, 11, 13, 14, 15, 16]
    """
    return [hour for hour in range(start_hour, end_hour + 1) if hour != lunch_hour]


def suggest_alternative_dates(
    provider: Provider,
    from_date: date,
    window_days: int = 14,
    max_suggestions: int = 3,
) -> list[date]:
    """Next dates the provider works, scanning forward from ``from_date``.

    Scans days 1..window_days after ``from_date`` (the date itself is
    excluded) and returns up to ``max_suggestions`` in ascending order.
    """
    suggestions: list[date] = []
    for offset in range(1, window_days + 1):
        candidate = from_date + timedelta(days=offset)
        if provider.is_available_on(candidate):
            suggestions.append(candidate)
            if len(suggestions) >= max_suggestions:
                break
    return suggestions


def upcoming_dates(start: date, days: int = 7) -> list[date]:
    """Consecutive dates shown in the date picker, starting at ``start``."""
    return [start + timedelta(days=offset) for offset in range(days)]
