"""Tests for completion rate, period histories and due-habit selection."""

from __future__ import annotations

from datetime import date, timedelta

from factories import InMemoryHabitRepository, make_entry, make_habit
from habitlog.services.habits import (
    HISTORY_PERIODS,
    completion_rate,
    compute_stats,
    habit_stats,
    is_due,
    monthly_buckets,
    select_due_habits,
    weekly_buckets,
)

SUNDAY = date(2024, 1, 7)


def test_end_to_end_daily_scenario():
    """Daily habit created Jan 1 with the last three days completed."""
    habit = make_habit("Meditate", created=date(2024, 1, 1))
    entries = [make_entry(habit, date(2024, 1, d)) for d in (5, 6, 7)]

    stats = compute_stats(habit, entries, today=SUNDAY)

    assert stats.habit_id == habit.id
    assert stats.current_streak == 3
    assert stats.longest_streak == 3
    assert stats.total_completions == 3
    assert stats.eligible_days == 7
    assert stats.completion_rate == 43


def test_habit_without_entries_is_all_zero():
    habit = make_habit("Journal", created=date(2023, 6, 1))

    stats = compute_stats(habit, [], today=SUNDAY)

    assert stats.current_streak == 0
    assert stats.longest_streak == 0
    assert stats.total_completions == 0
    assert stats.completion_rate == 0
    assert [b.completions for b in stats.weekly_stats] == [0] * HISTORY_PERIODS
    assert [b.completions for b in stats.monthly_stats] == [0] * HISTORY_PERIODS


def test_future_creation_degrades_to_zero_rate():
    habit = make_habit("Later", created=date(2024, 2, 1))
    entries = [make_entry(habit, SUNDAY)]

    stats = compute_stats(habit, entries, today=SUNDAY)

    assert stats.eligible_days == 0
    assert stats.completion_rate == 0
    assert stats.current_streak == 1


class TestCompletionRate:
    def test_rounds_half_up(self):
        assert completion_rate(1, 8) == 13  # 12.5%
        assert completion_rate(5, 8) == 63  # 62.5%

    def test_zero_or_negative_denominator(self):
        assert completion_rate(3, 0) == 0
        assert completion_rate(3, -2) == 0

    def test_weekly_habit_uses_target_days(self):
        habit = make_habit("Gym", frequency="weekly", target_days=[1, 3, 5], created=date(2023, 12, 31))
        entries = [make_entry(habit, date(2024, 1, 1)), make_entry(habit, date(2024, 1, 3))]

        stats = compute_stats(habit, entries, today=SUNDAY)

        assert stats.eligible_days == 3
        assert stats.completion_rate == 67

    def test_monthly_habit_created_this_month(self):
        habit = make_habit("Budget review", frequency="monthly", created=date(2024, 1, 5))
        entries = [make_entry(habit, date(2024, 1, 5))]

        stats = compute_stats(habit, entries, today=SUNDAY)

        assert stats.eligible_days == 1
        assert stats.completion_rate == 100


class TestWeeklyBuckets:
    def test_twelve_windows_oldest_first_ending_today(self):
        buckets = weekly_buckets([], today=SUNDAY)

        assert len(buckets) == 12
        assert buckets[-1].end == SUNDAY
        assert buckets[-1].start == date(2024, 1, 1)
        assert buckets[-1].label == "1/1"
        assert buckets[0].end == date(2023, 10, 22)
        assert buckets[0].label == "10/16"
        starts = [b.start for b in buckets]
        assert starts == sorted(starts)

    def test_windows_are_contiguous(self):
        buckets = weekly_buckets([], today=SUNDAY)
        for older, newer in zip(buckets, buckets[1:]):
            assert newer.start == older.end + timedelta(days=1)

    def test_counts_completed_days_per_window(self):
        days = [date(2024, 1, 5), date(2024, 1, 6), date(2024, 1, 7), date(2023, 12, 31)]
        buckets = weekly_buckets(days, today=SUNDAY)

        assert buckets[-1].completions == 3
        assert buckets[-2].completions == 1
        assert sum(b.completions for b in buckets) == 4

    def test_days_outside_history_are_not_counted(self):
        buckets = weekly_buckets([date(2023, 1, 1), date(2024, 1, 8)], today=SUNDAY)
        assert sum(b.completions for b in buckets) == 0


class TestMonthlyBuckets:
    def test_twelve_months_oldest_first(self):
        buckets = monthly_buckets([], today=SUNDAY)

        assert len(buckets) == 12
        assert buckets[0].label == "Feb 2023"
        assert buckets[-1].label == "Jan 2024"
        assert buckets[-1].start == date(2024, 1, 1)
        assert buckets[-1].end == date(2024, 1, 31)

    def test_month_ends_respect_leap_years(self):
        buckets = monthly_buckets([], today=date(2024, 3, 31))
        february = next(b for b in buckets if b.label == "Feb 2024")
        assert february.end == date(2024, 2, 29)

    def test_counts_per_calendar_month(self):
        days = [date(2023, 12, 15), date(2023, 12, 31), date(2024, 1, 2), date(2023, 2, 1)]
        buckets = monthly_buckets(days, today=SUNDAY)

        assert buckets[-1].completions == 1
        assert buckets[-2].completions == 2
        assert buckets[0].completions == 1

    def test_stats_expose_both_histories(self):
        habit = make_habit("Walk", created=date(2023, 1, 1))
        stats = compute_stats(habit, [make_entry(habit, SUNDAY)], today=SUNDAY)

        assert len(stats.weekly_stats) == len(stats.monthly_stats) == 12
        assert stats.weekly_stats[-1].completions == 1
        assert stats.monthly_stats[-1].completions == 1


class TestDueHabits:
    def test_daily_is_always_due(self):
        habit = make_habit("Water")
        assert all(is_due(habit, SUNDAY + timedelta(days=i)) for i in range(7))

    def test_weekly_uses_sunday_based_target_days(self):
        habit = make_habit("Gym", frequency="weekly", target_days=[1, 3, 5])
        assert is_due(habit, date(2024, 1, 8))  # Monday
        assert is_due(habit, date(2024, 1, 12))  # Friday
        assert not is_due(habit, SUNDAY)
        assert not is_due(habit, date(2024, 1, 9))  # Tuesday

    def test_weekly_without_target_days_is_never_due(self):
        habit = make_habit("Gym", frequency="weekly")
        assert not is_due(habit, date(2024, 1, 8))

    def test_monthly_due_on_first_of_month(self):
        habit = make_habit("Review", frequency="monthly")
        assert is_due(habit, date(2024, 2, 1))
        assert not is_due(habit, date(2024, 2, 2))

    def test_unknown_frequency_is_not_due(self):
        habit = make_habit("Odd", frequency="yearly")
        assert not is_due(habit, SUNDAY)

    def test_select_due_habits_skips_inactive_and_keeps_order(self):
        daily = make_habit("Water")
        paused = make_habit("Paused", is_active=False)
        weekly = make_habit("Gym", frequency="weekly", target_days=[1])
        monthly = make_habit("Review", frequency="monthly")

        monday = date(2024, 1, 1)
        assert select_due_habits([weekly, paused, daily, monthly], monday) == [weekly, daily, monthly]
        assert select_due_habits([weekly, paused, daily, monthly], SUNDAY) == [daily]

    def test_select_due_habits_defaults_to_today(self):
        habit = make_habit("Water")
        assert select_due_habits([habit]) == [habit]


def test_habit_stats_reads_entries_from_repository():
    habit = make_habit("Stretch", created=date(2024, 1, 1))
    other = make_habit("Other", created=date(2024, 1, 1))
    repo = InMemoryHabitRepository(
        habits=[habit, other],
        entries=[make_entry(habit, date(2024, 1, 6)), make_entry(habit, SUNDAY), make_entry(other, SUNDAY)],
    )

    stats = habit_stats(repo, habit, today=SUNDAY)

    assert stats.current_streak == 2
    assert stats.total_completions == 2
    assert stats.completion_rate == 29

