"""Habit statistics: streaks, completion rate, period histories and due filters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable, Sequence

from ..logging_config import get_logger
from ..models.habit import Frequency, Habit, HabitEntry
from .eligibility import eligible_days, weekday_index

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories.habit import HabitRepository

logger = get_logger(__name__)

HISTORY_PERIODS = 12


@dataclass(frozen=True, slots=True)
class PeriodCount:
    """Completed days inside one week or month window."""

    label: str
    start: date
    end: date
    completions: int


@dataclass(frozen=True, slots=True)
class HabitStats:
    """Derived statistics for a single habit."""

    habit_id: str
    current_streak: int = 0
    longest_streak: int = 0
    total_completions: int = 0
    completion_rate: int = 0
    eligible_days: int = 0
    weekly_stats: list[PeriodCount] = field(default_factory=list)
    monthly_stats: list[PeriodCount] = field(default_factory=list)


def completed_days(entries: Iterable[HabitEntry], habit_id: str | None = None) -> set[date]:
    """Return the distinct days with a completed entry.

    Duplicate entries for one day collapse to a single day; the day counts as
    completed when any of them is.
    """

    return {
        e.occurred_on
        for e in entries
        if e.completed and (habit_id is None or e.habit_id == habit_id)
    }


def compute_streaks(days: Iterable[date], *, today: date | None = None) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from completed days."""

    today = today or date.today()
    by_day = set(days)

    # Current streak: walk backwards from today until a gap, never further
    # than the number of completed days.
    current = 0
    cursor = today
    while cursor in by_day and current < len(by_day):
        current += 1
        cursor -= timedelta(days=1)

    # Longest streak: sweep through sorted days, counting consecutive runs.
    longest = 0
    run = 0
    last_day: date | None = None
    for d in sorted(by_day):
        if last_day is not None and d == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = d

    return current, longest


def completion_rate(completions: int, eligible: int) -> int:
    """Percentage of eligible days completed, rounded half up; 0 without eligible days."""

    if eligible <= 0:
        return 0
    ratio = Decimal(completions) * 100 / Decimal(eligible)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def weekly_buckets(
    days: Iterable[date], *, today: date | None = None, periods: int = HISTORY_PERIODS
) -> list[PeriodCount]:
    """Completions per trailing 7-day window, oldest first.

    Window ``i`` ends ``7 * i`` days before ``today``; labels are the window
    start as ``M/D``. Windows look back from their anchor day instead of
    forward, so the newest bucket is the week ending today (labelled
    ``1/1`` for today = 2024-01-07, not ``1/7``) and never covers future days.
    """

    today = today or date.today()
    done = set(days)
    buckets: list[PeriodCount] = []
    for i in range(periods):
        end = today - timedelta(days=7 * i)
        start = end - timedelta(days=6)
        count = sum(1 for d in done if start <= d <= end)
        buckets.insert(0, PeriodCount(f"{start.month}/{start.day}", start, end, count))
    return buckets


def monthly_buckets(
    days: Iterable[date], *, today: date | None = None, periods: int = HISTORY_PERIODS
) -> list[PeriodCount]:
    """Completions per calendar month for the trailing months, oldest first."""

    today = today or date.today()
    done = set(days)
    buckets: list[PeriodCount] = []
    for i in range(periods):
        start = _shift_month(today, -i)
        end = _shift_month(start, 1) - timedelta(days=1)
        count = sum(1 for d in done if start <= d <= end)
        buckets.insert(0, PeriodCount(start.strftime("%b %Y"), start, end, count))
    return buckets


def compute_stats(
    habit: Habit, entries: Iterable[HabitEntry], *, today: date | None = None
) -> HabitStats:
    """Compute :class:`HabitStats` for ``habit`` from its entries.

    Entries belonging to other habits are ignored. The function is pure and
    never raises for malformed data; it degrades to zero values instead.
    """

    today = today or date.today()
    days = completed_days(entries, habit.id)
    current, longest = compute_streaks(days, today=today)
    total = len(days)
    eligible = eligible_days(habit.frequency, habit.created_on, today, habit.target_days)

    return HabitStats(
        habit_id=habit.id,
        current_streak=current,
        longest_streak=longest,
        total_completions=total,
        completion_rate=completion_rate(total, eligible),
        eligible_days=eligible,
        weekly_stats=weekly_buckets(days, today=today),
        monthly_stats=monthly_buckets(days, today=today),
    )


def habit_stats(repo: "HabitRepository", habit: Habit, *, today: date | None = None) -> HabitStats:
    """Load ``habit``'s entries from ``repo`` and compute its statistics."""

    entries = repo.list_entries_for_habit(habit.id)
    stats = compute_stats(habit, entries, today=today)
    logger.debug(
        "Computed habit stats",
        extra={"habit_id": habit.id, "entries": len(entries), "streak": stats.current_streak},
    )
    return stats


def is_due(habit: Habit, on: date) -> bool:
    """Return True when ``habit``'s frequency policy makes it due on ``on``."""

    if habit.frequency == Frequency.DAILY:
        return True
    if habit.frequency == Frequency.WEEKLY:
        return weekday_index(on) in set(habit.target_days or ())
    if habit.frequency == Frequency.MONTHLY:
        return on.day == 1
    return False


def select_due_habits(habits: Sequence[Habit], reference_date: date | None = None) -> list[Habit]:
    """Active habits due on ``reference_date`` (defaults to today), in input order."""

    reference_date = reference_date or date.today()
    return [h for h in habits if h.is_active and is_due(h, reference_date)]


__all__ = [
    "HISTORY_PERIODS",
    "HabitStats",
    "PeriodCount",
    "completed_days",
    "completion_rate",
    "compute_stats",
    "compute_streaks",
    "habit_stats",
    "is_due",
    "monthly_buckets",
    "select_due_habits",
    "weekly_buckets",
]
