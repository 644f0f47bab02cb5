"""SQLModel table exports."""

from .habit import FREQUENCY_OPTIONS, Frequency, Habit, HabitEntry

__all__ = [
    "FREQUENCY_OPTIONS",
    "Frequency",
    "Habit",
    "HabitEntry",
]
