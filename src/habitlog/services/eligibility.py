"""Eligible-day counting for completion-rate denominators."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..models.habit import Frequency


def weekday_index(day: date) -> int:
    """Return the weekday of ``day`` with 0 = Sunday through 6 = Saturday."""
    return day.isoweekday() % 7


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start``'s month to ``end``'s month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def eligible_days(
    frequency: str,
    created_on: date,
    today: date,
    target_days: Iterable[int] | None = None,
) -> int:
    """Count the days a habit was due between creation and ``today``.

    Daily habits count every calendar day, creation day and today included.
    Weekly habits count the days whose weekday is in ``target_days``; without
    target days they are counted like daily habits. Monthly habits count one
    unit per calendar month touched, never fewer than one.

    A creation date after ``today`` yields 0 for daily and weekly habits.
    """

    if frequency == Frequency.MONTHLY:
        return max(1, months_between(created_on, today) + 1)

    targets = set(target_days or ())
    if frequency == Frequency.WEEKLY and targets:
        count = 0
        cursor = created_on
        while cursor <= today:
            if weekday_index(cursor) in targets:
                count += 1
            cursor += timedelta(days=1)
        return count

    return max(0, (today - created_on).days + 1)


__all__ = ["eligible_days", "months_between", "weekday_index"]
