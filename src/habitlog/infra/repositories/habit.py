"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Frequency, Habit, HabitEntry

logger = get_logger(__name__)

_EDITABLE_FIELDS = (
    "name",
    "description",
    "color",
    "category",
    "frequency",
    "target_days",
    "is_active",
)


def _validate(habit: Habit) -> None:
    """Check frequency and target days; drop target days for non-weekly habits."""

    valid = {f.value for f in Frequency}
    if habit.frequency not in valid:
        raise ValueError(f"Unknown frequency {habit.frequency!r}; expected one of {sorted(valid)}")
    if not (habit.name or "").strip():
        raise ValueError("Habit name is required")

    if habit.frequency != Frequency.WEEKLY:
        habit.target_days = None
        return

    days = habit.target_days or []
    bad = [d for d in days if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6]
    if bad:
        raise ValueError(f"Target days must be weekdays 0-6, got {bad}")
    habit.target_days = sorted(set(days)) or None


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_habits(self, include_inactive: bool = True) -> list[Habit]:
        """List habits, newest first."""
        try:
            with self.session_factory() as session:
                statement = select(Habit).order_by(Habit.created_at.desc())  # type: ignore[attr-defined]
                if not include_inactive:
                    statement = statement.where(Habit.is_active == True)  # noqa: E712
                rows = list(session.exec(statement).all())
                session.expunge_all()
                return rows
        except SQLAlchemyError:
            logger.error("Failed to list habits", exc_info=True)
            return []

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        try:
            with self.session_factory() as session:
                obj = session.get(Habit, habit_id)
                if obj:
                    session.expunge(obj)
                return obj
        except SQLAlchemyError:
            logger.error("Failed to load habit", exc_info=True, extra={"habit_id": habit_id})
            return None

    def save_habit(self, habit: Habit) -> Habit:
        """Create a habit, or overwrite an existing one keeping its id and creation time."""
        _validate(habit)
        try:
            with self.session_factory() as session:
                existing = session.get(Habit, habit.id) if habit.id else None
                if existing:
                    for name in _EDITABLE_FIELDS:
                        setattr(existing, name, getattr(habit, name))
                    target = existing
                else:
                    target = habit
                session.add(target)
                session.commit()
                session.refresh(target)
                session.expunge(target)
        except SQLAlchemyError:
            logger.error("Failed to save habit", exc_info=True, extra={"habit_id": habit.id})
            raise
        logger.info(
            "Habit %s", "updated" if existing else "created", extra={"habit_id": target.id}
        )
        return target

    def delete_habit(self, habit_id: str) -> None:
        """Delete a habit and all of its entries."""
        try:
            with self.session_factory() as session:
                entries = session.exec(
                    select(HabitEntry).where(HabitEntry.habit_id == habit_id)
                ).all()
                for entry in entries:
                    session.delete(entry)
                session.flush()
                habit = session.get(Habit, habit_id)
                if habit:
                    session.delete(habit)
                session.commit()
        except SQLAlchemyError:
            logger.error("Failed to delete habit", exc_info=True, extra={"habit_id": habit_id})
            raise
        logger.info("Habit deleted", extra={"habit_id": habit_id})

    # Habit entry operations
    def _list_entries(self, statement, **context) -> list[HabitEntry]:
        try:
            with self.session_factory() as session:
                rows = list(session.exec(statement).all())
                session.expunge_all()
                return rows
        except SQLAlchemyError:
            logger.error("Failed to list habit entries", exc_info=True, extra=context)
            return []

    def list_entries_for_habit(self, habit_id: str) -> list[HabitEntry]:
        """All entries of one habit ordered by date."""
        statement = (
            select(HabitEntry)
            .where(HabitEntry.habit_id == habit_id)
            .order_by(HabitEntry.occurred_on)  # type: ignore[arg-type]
        )
        return self._list_entries(statement, habit_id=habit_id)

    def list_entries_for_date(self, day: date) -> list[HabitEntry]:
        """All entries recorded for a calendar day."""
        statement = select(HabitEntry).where(HabitEntry.occurred_on == day)
        return self._list_entries(statement, day=day.isoformat())

    def list_all_entries(self) -> list[HabitEntry]:
        """Every entry across habits."""
        statement = select(HabitEntry).order_by(HabitEntry.occurred_on)  # type: ignore[arg-type]
        return self._list_entries(statement)

    def get_entry(self, habit_id: str, day: date) -> Optional[HabitEntry]:
        """Get the entry of a habit for a day."""
        try:
            with self.session_factory() as session:
                obj = session.exec(
                    select(HabitEntry)
                    .where(HabitEntry.habit_id == habit_id)
                    .where(HabitEntry.occurred_on == day)
                ).first()
                if obj:
                    session.expunge(obj)
                return obj
        except SQLAlchemyError:
            logger.error("Failed to load habit entry", exc_info=True, extra={"habit_id": habit_id})
            return None

    def toggle_completion(self, habit_id: str, day: date) -> HabitEntry:
        """Flip a day's completion, creating a completed entry on first use."""
        try:
            with self.session_factory() as session:
                if session.get(Habit, habit_id) is None:
                    raise ValueError(f"Habit {habit_id} does not exist")

                entry = session.exec(
                    select(HabitEntry)
                    .where(HabitEntry.habit_id == habit_id)
                    .where(HabitEntry.occurred_on == day)
                ).first()

                if entry:
                    entry.completed = not entry.completed
                else:
                    entry = HabitEntry(habit_id=habit_id, occurred_on=day, completed=True)
                entry.completed_at = datetime.now() if entry.completed else None

                session.add(entry)
                session.commit()
                session.refresh(entry)
                session.expunge(entry)
        except SQLAlchemyError:
            logger.error(
                "Failed to toggle completion",
                exc_info=True,
                extra={"habit_id": habit_id, "day": day.isoformat()},
            )
            raise
        logger.info(
            "Completion toggled",
            extra={"habit_id": habit_id, "day": day.isoformat(), "completed": entry.completed},
        )
        return entry
