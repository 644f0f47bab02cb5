"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitEntry


class HabitRepository(Protocol):
    """Storage port for habits and their completion entries."""

    def list_habits(self, include_inactive: bool = True) -> list[Habit]:
        """List habits, newest first."""
        ...

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def save_habit(self, habit: Habit) -> Habit:
        """Create a habit, or overwrite an existing one keeping its id and creation time."""
        ...

    def delete_habit(self, habit_id: str) -> None:
        """Delete a habit and all of its entries."""
        ...

    # Habit entry operations
    def list_entries_for_habit(self, habit_id: str) -> list[HabitEntry]:
        """All entries of one habit ordered by date."""
        ...

    def list_entries_for_date(self, day: date) -> list[HabitEntry]:
        """All entries recorded for a calendar day."""
        ...

    def list_all_entries(self) -> list[HabitEntry]:
        """Every entry across habits."""
        ...

    def get_entry(self, habit_id: str, day: date) -> Optional[HabitEntry]:
        """Get the entry of a habit for a day."""
        ...

    def toggle_completion(self, habit_id: str, day: date) -> HabitEntry:
        """Flip a day's completion, creating a completed entry on first use."""
        ...
