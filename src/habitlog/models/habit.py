"""Habit tracking data structures."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


class Frequency(str, Enum):
    """Frequency policies deciding which calendar days a habit is due."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


FREQUENCY_OPTIONS: list[tuple[str, str]] = [
    (Frequency.DAILY.value, "Daily"),
    (Frequency.WEEKLY.value, "Weekly"),
    (Frequency.MONTHLY.value, "Monthly"),
]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


class Habit(SQLModel, table=True):
    """A user-defined recurring habit."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    color: str = Field(default="#3B82F6", max_length=16)
    category: Optional[str] = Field(default=None, max_length=64)
    frequency: str = Field(default=Frequency.DAILY.value, max_length=16)
    # Weekdays with 0 = Sunday; only used by weekly habits.
    target_days: Optional[list[int]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    # Local wall-clock timestamps; stored without timezone.
    created_at: datetime = Field(
        default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False)
    )
    is_active: bool = Field(default=True, nullable=False)

    @property
    def created_on(self) -> date:
        """Calendar day the habit was created."""
        return self.created_at.date()


class HabitEntry(SQLModel, table=True):
    """Completion record for a habit on one calendar day."""

    __tablename__: ClassVar[str] = "habit_entry"
    __table_args__ = (UniqueConstraint("habit_id", "occurred_on", name="uq_habit_entry_day"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    habit_id: str = Field(foreign_key="habit.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    completed: bool = Field(default=True, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=500)
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=False), nullable=True)
    )
