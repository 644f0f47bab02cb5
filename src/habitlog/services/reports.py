"""Dashboard aggregations across habits: summaries, consistency, heatmap, progress."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..models.habit import Habit, HabitEntry
from .eligibility import weekday_index
from .habits import completion_rate, compute_stats, select_due_habits

TIME_RANGE_DAYS = {"week": 7, "month": 30, "year": 365}


@dataclass(frozen=True, slots=True)
class OverallSummary:
    """Headline numbers for the analytics dashboard."""

    total_habits: int
    total_completions: int
    average_completion: int
    best_streak: int
    active_streaks: int


@dataclass(frozen=True, slots=True)
class DayConsistency:
    day: date
    label: str
    completed: int
    total: int
    percentage: int


@dataclass(frozen=True, slots=True)
class HeatmapCell:
    day: date
    completed: int
    total: int
    intensity: float


@dataclass(frozen=True, slots=True)
class DayProgress:
    day: date
    completed: int
    total: int
    percentage: int


def _rounded_mean(values: Sequence[int]) -> int:
    """Mean of ``values`` rounded half up; 0 for no values."""
    return completion_rate(sum(values), len(values) * 100) if values else 0


def _group_by_habit(entries: Iterable[HabitEntry]) -> dict[str, list[HabitEntry]]:
    grouped: dict[str, list[HabitEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.habit_id].append(entry)
    return grouped


def _group_by_day(
    entries: Iterable[HabitEntry], habit_id: str | None = None
) -> dict[date, list[HabitEntry]]:
    grouped: dict[date, list[HabitEntry]] = defaultdict(list)
    for entry in entries:
        if habit_id is None or entry.habit_id == habit_id:
            grouped[entry.occurred_on].append(entry)
    return grouped


def overall_summary(
    habits: Sequence[Habit], entries: Iterable[HabitEntry], *, today: date | None = None
) -> OverallSummary:
    """Summarise every habit.

    ``average_completion`` averages the completion rate of active habits that
    have at least one entry; streak figures consider all habits.
    """

    today = today or date.today()
    entries = list(entries)
    by_habit = _group_by_habit(entries)

    rates: list[int] = []
    best = 0
    active_streaks = 0
    for habit in habits:
        stats = compute_stats(habit, by_habit.get(habit.id, []), today=today)
        best = max(best, stats.longest_streak)
        if stats.current_streak > 0:
            active_streaks += 1
        if habit.is_active and habit.id in by_habit:
            rates.append(stats.completion_rate)

    return OverallSummary(
        total_habits=sum(1 for h in habits if h.is_active),
        total_completions=sum(1 for e in entries if e.completed),
        average_completion=_rounded_mean(rates),
        best_streak=best,
        active_streaks=active_streaks,
    )


def streak_summary(
    habits: Sequence[Habit], entries: Iterable[HabitEntry], *, today: date | None = None
) -> tuple[int, int]:
    """Return (max_current_streak, average_current_streak) across habits."""

    today = today or date.today()
    by_habit = _group_by_habit(entries)
    streaks = [
        compute_stats(h, by_habit.get(h.id, []), today=today).current_streak for h in habits
    ]
    if not streaks:
        return 0, 0
    return max(streaks), _rounded_mean(streaks)


def _consistency_label(day: date, time_range: str) -> str:
    if time_range == "week":
        return day.strftime("%a")
    if time_range == "month":
        return str(day.day)
    return day.strftime("%b")


def consistency_series(
    entries: Iterable[HabitEntry],
    *,
    time_range: str = "month",
    habit_id: str | None = None,
    today: date | None = None,
) -> list[DayConsistency]:
    """Per-day completed/total counts over a trailing range, oldest first."""

    if time_range not in TIME_RANGE_DAYS:
        raise ValueError(f"time_range must be one of {sorted(TIME_RANGE_DAYS)}, got {time_range!r}")

    today = today or date.today()
    by_day = _group_by_day(entries, habit_id)
    series: list[DayConsistency] = []
    for offset in range(TIME_RANGE_DAYS[time_range] - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_entries = by_day.get(day, [])
        completed = sum(1 for e in day_entries if e.completed)
        total = len(day_entries)
        series.append(
            DayConsistency(
                day=day,
                label=_consistency_label(day, time_range),
                completed=completed,
                total=total,
                percentage=completion_rate(completed, total),
            )
        )
    return series


def heatmap_grid(
    entries: Iterable[HabitEntry],
    *,
    habit_id: str | None = None,
    weeks: int = 12,
    today: date | None = None,
) -> list[list[HeatmapCell]]:
    """Rows of seven days ending today, oldest row first."""

    today = today or date.today()
    by_day = _group_by_day(entries, habit_id)
    grid: list[list[HeatmapCell]] = []
    for week in range(weeks - 1, -1, -1):
        row: list[HeatmapCell] = []
        for weekday in range(7):
            day = today - timedelta(days=week * 7 + (6 - weekday))
            day_entries = by_day.get(day, [])
            completed = sum(1 for e in day_entries if e.completed)
            total = len(day_entries)
            row.append(
                HeatmapCell(
                    day=day,
                    completed=completed,
                    total=total,
                    intensity=completed / total if total else 0.0,
                )
            )
        grid.append(row)
    return grid


def _progress_for(day: date, habits: Sequence[Habit], done: set[tuple[str, date]]) -> DayProgress:
    due = select_due_habits(habits, day)
    completed = sum(1 for h in due if (h.id, day) in done)
    return DayProgress(
        day=day,
        completed=completed,
        total=len(due),
        percentage=completion_rate(completed, len(due)),
    )


def today_progress(
    habits: Sequence[Habit], entries: Iterable[HabitEntry], *, today: date | None = None
) -> DayProgress:
    """Completion of the habits due today."""

    today = today or date.today()
    done = {(e.habit_id, e.occurred_on) for e in entries if e.completed}
    return _progress_for(today, habits, done)


def weekly_progress(
    habits: Sequence[Habit], entries: Iterable[HabitEntry], *, today: date | None = None
) -> list[DayProgress]:
    """Progress for each day of the Sunday-started week containing ``today``."""

    today = today or date.today()
    done = {(e.habit_id, e.occurred_on) for e in entries if e.completed}
    week_start = today - timedelta(days=weekday_index(today))
    return [_progress_for(week_start + timedelta(days=i), habits, done) for i in range(7)]


__all__ = [
    "DayConsistency",
    "DayProgress",
    "HeatmapCell",
    "OverallSummary",
    "TIME_RANGE_DAYS",
    "consistency_series",
    "heatmap_grid",
    "overall_summary",
    "streak_summary",
    "today_progress",
    "weekly_progress",
]
