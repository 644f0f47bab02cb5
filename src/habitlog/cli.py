"""Command line interface for HabitLog."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click

from .config import BaseConfig
from .domain.repositories import HabitRepository
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .logging_config import get_logger, setup_logging
from .models.habit import FREQUENCY_OPTIONS, Habit
from .services import reports
from .services.habits import habit_stats, select_due_habits

logger = get_logger(__name__)

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class DateParam(click.ParamType):
    """Parse ``YYYY-MM-DD`` into a :class:`datetime.date`."""

    name = "date"

    def convert(self, value, param, ctx):
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(value)
        except ValueError:
            self.fail(f"{value!r} is not a YYYY-MM-DD date", param, ctx)


DATE = DateParam()


def _repo(ctx: click.Context) -> HabitRepository:
    return ctx.obj["repo"]


def _require_habit(repo: HabitRepository, habit_id: str) -> Habit:
    habit = repo.get_habit(habit_id)
    if habit is None:
        raise click.ClickException(f"No habit with id {habit_id}")
    return habit


def _describe(habit: Habit) -> str:
    schedule = habit.frequency
    if habit.target_days:
        schedule += " (" + ", ".join(WEEKDAY_NAMES[d] for d in habit.target_days) + ")"
    status = "" if habit.is_active else " [inactive]"
    return f"{habit.id}  {habit.name}  {schedule}{status}"


@click.group()
@click.option(
    "--database-url",
    envvar="HABITLOG_DATABASE_URL",
    default=None,
    help="SQLAlchemy URL of the habit database.",
)
@click.pass_context
def cli(ctx: click.Context, database_url: str | None) -> None:
    """Track habits and review streaks from the terminal."""

    config = BaseConfig(database_url=database_url)
    setup_logging(config)
    _, session_factory = bootstrap_database(config)
    ctx.obj = {"config": config, "repo": SQLModelHabitRepository(session_factory)}


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""
    click.echo(f"Database ready at {ctx.obj['config'].DATABASE_URL}")


@cli.command("add")
@click.argument("name")
@click.option(
    "--frequency",
    type=click.Choice([key for key, _ in FREQUENCY_OPTIONS]),
    default="daily",
    show_default=True,
)
@click.option(
    "--target-day",
    "target_days",
    type=click.IntRange(0, 6),
    multiple=True,
    help="Weekday for weekly habits, 0 = Sunday. Repeatable.",
)
@click.option("--description", default=None)
@click.option("--category", default=None)
@click.option("--color", default="#3B82F6", show_default=True)
@click.pass_context
def add_habit(ctx, name, frequency, target_days, description, category, color) -> None:
    """Create a habit."""

    if frequency == "weekly" and not target_days:
        raise click.BadParameter("weekly habits need at least one --target-day", param_hint="--target-day")
    habit = Habit(
        name=name,
        frequency=frequency,
        target_days=list(target_days) or None,
        description=description,
        category=category,
        color=color,
    )
    try:
        saved = _repo(ctx).save_habit(habit)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created {_describe(saved)}")


@cli.command("edit")
@click.argument("habit_id")
@click.option("--name", default=None)
@click.option("--frequency", type=click.Choice([key for key, _ in FREQUENCY_OPTIONS]), default=None)
@click.option(
    "--target-day",
    "target_days",
    type=click.IntRange(0, 6),
    multiple=True,
    help="Replaces the weekly target days. Repeatable.",
)
@click.option("--description", default=None)
@click.option("--category", default=None)
@click.option("--color", default=None)
@click.option("--active/--inactive", "is_active", default=None, help="Resume or pause the habit.")
@click.pass_context
def edit_habit(ctx, habit_id, name, frequency, target_days, description, category, color, is_active) -> None:
    """Change a habit's fields; its id, history and creation time are kept."""

    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    changes = {
        "name": name,
        "frequency": frequency,
        "description": description,
        "category": category,
        "color": color,
        "is_active": is_active,
    }
    for field, value in changes.items():
        if value is not None:
            setattr(habit, field, value)
    if target_days:
        habit.target_days = list(target_days)
    if habit.frequency == "weekly" and not habit.target_days:
        raise click.BadParameter("weekly habits need at least one --target-day", param_hint="--target-day")

    try:
        saved = repo.save_habit(habit)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Updated {_describe(saved)}")


@cli.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive habits.")
@click.pass_context
def list_habits(ctx, include_inactive: bool) -> None:
    """List habits."""
    habits = _repo(ctx).list_habits(include_inactive=include_inactive)
    if not habits:
        click.echo("No habits yet.")
        return
    for habit in habits:
        click.echo(_describe(habit))


@cli.command("toggle")
@click.argument("habit_id")
@click.option("--date", "day", type=DATE, default=None, help="Day to toggle (default today).")
@click.pass_context
def toggle(ctx, habit_id: str, day: date | None) -> None:
    """Mark a habit done for a day, or undo it."""

    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    entry = repo.toggle_completion(habit.id, day or date.today())
    state = "done" if entry.completed else "not done"
    click.echo(f"{habit.name}: {entry.occurred_on.isoformat()} marked {state}")


@cli.command("today")
@click.option("--date", "day", type=DATE, default=None)
@click.pass_context
def today_cmd(ctx, day: date | None) -> None:
    """Show habits due on a day and whether they are done."""

    repo = _repo(ctx)
    day = day or date.today()
    due = select_due_habits(repo.list_habits(include_inactive=False), day)
    entries = repo.list_entries_for_date(day)
    done = {e.habit_id for e in entries if e.completed}
    if not due:
        click.echo(f"Nothing due on {day.isoformat()}.")
        return
    for habit in due:
        mark = "x" if habit.id in done else " "
        click.echo(f"[{mark}] {habit.name} ({habit.id})")
    progress = reports.today_progress(due, entries, today=day)
    click.echo(f"{progress.completed}/{progress.total} done ({progress.percentage}%)")


@cli.command("stats")
@click.argument("habit_id")
@click.option("--date", "day", type=DATE, default=None, help="Evaluate as of this day.")
@click.pass_context
def stats_cmd(ctx, habit_id: str, day: date | None) -> None:
    """Print streaks and completion rate for a habit."""

    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    stats = habit_stats(repo, habit, today=day)
    click.echo(habit.name)
    click.echo(f"  current streak:    {stats.current_streak}")
    click.echo(f"  longest streak:    {stats.longest_streak}")
    click.echo(f"  total completions: {stats.total_completions}")
    click.echo(f"  completion rate:   {stats.completion_rate}% of {stats.eligible_days} eligible days")
    click.echo("  last 12 weeks:     " + " ".join(str(b.completions) for b in stats.weekly_stats))


@cli.command("summary")
@click.option("--date", "day", type=DATE, default=None)
@click.pass_context
def summary_cmd(ctx, day: date | None) -> None:
    """Print dashboard totals across all habits."""

    repo = _repo(ctx)
    summary = reports.overall_summary(repo.list_habits(), repo.list_all_entries(), today=day)
    click.echo(f"active habits:      {summary.total_habits}")
    click.echo(f"total completions:  {summary.total_completions}")
    click.echo(f"average completion: {summary.average_completion}%")
    click.echo(f"best streak:        {summary.best_streak}")
    click.echo(f"active streaks:     {summary.active_streaks}")


@cli.command("delete")
@click.argument("habit_id")
@click.confirmation_option(prompt="Delete this habit and all of its entries?")
@click.pass_context
def delete_cmd(ctx, habit_id: str) -> None:
    """Delete a habit and its history."""
    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    repo.delete_habit(habit.id)
    click.echo(f"Deleted {habit.name}")


@cli.command("chart")
@click.argument("habit_id")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--period",
    type=click.Choice(["weekly", "monthly", "heatmap"]),
    default="weekly",
    show_default=True,
)
@click.option("--date", "day", type=DATE, default=None)
@click.pass_context
def chart_cmd(ctx, habit_id: str, output: Path, period: str, day: date | None) -> None:
    """Render a habit's history chart to a PNG file."""

    from . import charts

    repo = _repo(ctx)
    habit = _require_habit(repo, habit_id)
    if period == "heatmap":
        grid = reports.heatmap_grid(repo.list_entries_for_habit(habit.id), habit_id=habit.id, today=day)
        path = charts.heatmap_png(grid, output_path=output)
    else:
        stats = habit_stats(repo, habit, today=day)
        path = charts.completion_history_png(stats, period=period, output_path=output)
    logger.info("Chart written", extra={"habit_id": habit.id, "path": str(path)})
    click.echo(f"Chart written: {path}")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
