"""Command-line entry point for Streakwise."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .domain.calendar import day_key, parse_day_key
from .domain.summary import Granularity, StatsPeriod
from .logging_config import setup_logging
from .services import HabitNotFoundError, export_summary_csv

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def _parse_weekdays(raw: Optional[str]) -> list[int]:
    if not raw:
        return []
    days = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        if token.isdigit():
            days.append(int(token))
            continue
        try:
            days.append([n.lower() for n in WEEKDAY_NAMES].index(token[:3].lower()))
        except ValueError as exc:
            raise click.BadParameter(f"Unknown weekday: {token}") from exc
    return days


def _parse_day(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_day_key(value)
    except ValueError as exc:
        raise click.BadParameter(f"Expected yyyy-mm-dd, got {value!r}") from exc


def _ctx(obj: dict) -> AppContext:
    if "app" not in obj:
        config = BaseConfig()
        setup_logging(config)
        obj["app"] = create_app_context(config, owner_id=obj.get("owner"))
        click.get_current_context().call_on_close(obj["app"].dispose)
    return obj["app"]


@click.group()
@click.option("--owner", default=None, help="Owner id (defaults to STREAKWISE_DEFAULT_OWNER)")
@click.pass_context
def cli(ctx: click.Context, owner: Optional[str]) -> None:
    """Track habits, streaks and completion calendars."""

    ctx.ensure_object(dict)
    if owner:
        ctx.obj["owner"] = owner


@cli.command("init-db")
@click.pass_obj
def init_db(obj: dict) -> None:
    """Create the database schema."""

    app = _ctx(obj)
    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@cli.command("add")
@click.argument("title")
@click.option("--goal", "daily_goal", type=int, default=1, show_default=True)
@click.option(
    "--frequency",
    type=click.Choice(["daily", "weekly", "custom"]),
    default="daily",
    show_default=True,
)
@click.option("--weekdays", default=None, help="Comma list, e.g. mon,wed,fri or 1,3,5")
@click.option("--start", default=None, help="Start day yyyy-mm-dd (default today)")
@click.option("--end", default=None, help="End day yyyy-mm-dd")
@click.option("--unit", default=None)
@click.pass_obj
def add_habit(
    obj: dict,
    title: str,
    daily_goal: int,
    frequency: str,
    weekdays: Optional[str],
    start: Optional[str],
    end: Optional[str],
    unit: Optional[str],
) -> None:
    """Create a habit."""

    app = _ctx(obj)
    try:
        habit = app.tracker.create_habit(
            app.owner_id,
            title,
            daily_goal=daily_goal,
            frequency=frequency,
            weekdays=_parse_weekdays(weekdays),
            start_date=_parse_day(start),
            end_date=_parse_day(end),
            unit=unit,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    click.echo(f"{habit.id}  {habit.title}")


@cli.command("list")
@click.pass_obj
def list_habits(obj: dict) -> None:
    """List habits with their streaks."""

    app = _ctx(obj)
    due = {h.id for h in app.reports.habits_due(app.owner_id)}
    for habit in app.tracker.list_habits(app.owner_id):
        if habit.recurrence.weekdays:
            schedule = ",".join(WEEKDAY_NAMES[d] for d in sorted(habit.recurrence.weekdays))
        else:
            schedule = habit.recurrence.frequency
        marker = "*" if habit.id in due else " "
        click.echo(
            f"{marker} {habit.id}  {habit.title:<24} {schedule:<16} "
            f"streak {habit.current_streak} (best {habit.best_streak})"
        )


@cli.command("done")
@click.argument("habit_id")
@click.pass_obj
def mark_done(obj: dict, habit_id: str) -> None:
    """Mark a habit completed today."""

    app = _ctx(obj)
    try:
        habit = app.tracker.mark_completed(habit_id, app.owner_id)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{habit.title}: streak {habit.current_streak} (best {habit.best_streak})")


@cli.command("undo")
@click.argument("habit_id")
@click.pass_obj
def mark_undone(obj: dict, habit_id: str) -> None:
    """Undo today's completion."""

    app = _ctx(obj)
    try:
        habit = app.tracker.mark_incompleted(habit_id, app.owner_id)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{habit.title}: streak {habit.current_streak} (best {habit.best_streak})")


@cli.command("log")
@click.argument("habit_id")
@click.option("--inc", "action", flag_value="inc", default=True, help="Add one unit (default)")
@click.option("--dec", "action", flag_value="dec", help="Remove one unit")
@click.option("--set", "value", type=int, default=None, help="Set progress to a value")
@click.option("--goal", type=int, default=None, help="Override the day's goal (with --set)")
@click.option("--day", default=None, help="Day yyyy-mm-dd (default today)")
@click.pass_obj
def log_progress(
    obj: dict,
    habit_id: str,
    action: str,
    value: Optional[int],
    goal: Optional[int],
    day: Optional[str],
) -> None:
    """Log progress for a habit."""

    app = _ctx(obj)
    target = _parse_day(day)
    try:
        if value is not None:
            record = app.tracker.set_progress(habit_id, app.owner_id, value, goal=goal, day=target)
        elif action == "dec":
            record = app.tracker.decrement_progress(habit_id, app.owner_id, target)
        else:
            record = app.tracker.increment_progress(habit_id, app.owner_id, target)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    click.echo(f"{day_key(record.day)}: {record.progress}/{record.goal}")


@cli.command("calendar")
@click.argument("habit_id")
@click.option("--days", type=int, default=None, help="Window length (default from config)")
@click.option("--rollup", type=click.Choice(["week", "month"]), default=None)
@click.option("--csv", "csv_path", type=click.Path(path_type=Path), default=None)
@click.pass_obj
def show_calendar(
    obj: dict,
    habit_id: str,
    days: Optional[int],
    rollup: Optional[str],
    csv_path: Optional[Path],
) -> None:
    """Show a habit's completion calendar."""

    app = _ctx(obj)
    try:
        summary = app.reports.calendar(habit_id, app.owner_id, window_length=days)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc

    cells = []
    for day in summary.days:
        if not day.is_active:
            cells.append(".")
        elif day.completed:
            cells.append("#")
        elif day.progress > 0:
            cells.append("+")
        else:
            cells.append("-")
    for offset in range(0, len(cells), 7):
        click.echo(" ".join(cells[offset:offset + 7]))
    click.echo(
        f"{summary.title}: {summary.completed_scheduled_days}/{summary.total_scheduled_days} "
        f"scheduled days ({summary.percent_complete}%)"
    )

    if rollup:
        for row in app.reports.habit_rollup(
            habit_id, app.owner_id, Granularity(rollup), window_length=days
        ):
            click.echo(
                f"{day_key(row.period_start)}  {row.completed}/{row.scheduled}  "
                f"{row.percent_complete}%"
            )

    if csv_path is not None:
        written = export_summary_csv(summary=summary, output_path=csv_path)
        click.echo(f"Export written: {written}")


@cli.command("stats")
@click.option(
    "--period", type=click.Choice(["week", "month", "year"]), default="week", show_default=True
)
@click.pass_obj
def show_stats(obj: dict, period: str) -> None:
    """Show cross-habit statistics for the last 7, 30 or 365 days."""

    app = _ctx(obj)
    stats = app.reports.stats_for_period(app.owner_id, StatsPeriod.from_label(period))
    click.echo(f"{day_key(stats.start)} .. {day_key(stats.end)}")
    click.echo(f"perfect {stats.perfect}  partial {stats.partial}  missed {stats.missed}")
    click.echo(f"average completion {stats.average_completion}%")
    titles = {h.id: h.title for h in app.tracker.list_habits(app.owner_id)}
    for habit_id, done in stats.completed_by_habit.items():
        click.echo(f"  {titles.get(habit_id, habit_id)}: {done} done")


def main() -> None:  # pragma: no cover - console entry point
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
