"""HabitLog: habit tracking with streak and completion statistics."""

from __future__ import annotations

from .config import BaseConfig
from .services.habits import HabitStats, compute_stats, select_due_habits

__all__ = ["BaseConfig", "HabitStats", "compute_stats", "select_due_habits"]
