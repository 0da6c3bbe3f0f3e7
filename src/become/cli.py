"""Become CLI - Daily Planner."""

import json
import logging
import sys
from datetime import date, datetime, timedelta

import click

from .config import load_config
from .core.events import Category, Event, EventDraft, RepeatOption, ScheduleError, Weekday
from .core.gesture import GestureKind
from .core.timegrid import seconds_since_midnight
from .display import color_rgb, format_clock, format_range, parse_clock, sample_drafts
from .materializer import sort_by_start
from .mutations import SeriesScope
from .planner import Planner, build_planner

CATEGORY_CHOICE = click.Choice([c.value for c in Category])
REPEAT_CHOICE = click.Choice(["none", "daily", "weekly"])


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """Become - Daily Planner CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)


def _planner(ctx) -> Planner:
    if "planner" not in ctx.obj:
        ctx.obj["planner"] = build_planner(load_config())
    return ctx.obj["planner"]


def _fail(message: str):
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _target(target_date: str | None) -> date:
    if not target_date:
        return date.today()
    try:
        return date.fromisoformat(target_date)
    except ValueError:
        _fail(f"Invalid date '{target_date}', expected YYYY-MM-DD")


def _clock(value: str) -> int:
    try:
        return parse_clock(value)
    except ValueError as e:
        _fail(str(e))


def _repeat(repeat: str, days: str | None) -> RepeatOption:
    if repeat == "daily":
        return RepeatOption.daily()
    if repeat == "weekly":
        try:
            weekdays = [Weekday.parse(d) for d in (days or "").split(",") if d.strip()]
        except ValueError as e:
            _fail(str(e))
        return RepeatOption.weekly(weekdays)
    return RepeatOption.none()


def _find_event(planner: Planner, target: date, ident: str) -> Event:
    """Resolve an id prefix or exact title among the events rendered on a date."""
    events = planner.materialize(target)
    matches = [e for e in events if e.id.startswith(ident)]
    if not matches:
        matches = [e for e in events if e.title.lower() == ident.lower()]
    if not matches:
        _fail(f"No event '{ident}' on {target.isoformat()}")
    if len(matches) > 1:
        _fail(f"'{ident}' matches {len(matches)} events, use an id prefix")
    return matches[0]


def _show_day(events: list[Event], target: date, as_json: bool, use_24h: bool, now: int | None = None) -> None:
    """Shared day display logic."""
    events = sort_by_start(events)
    if as_json:
        click.echo(json.dumps([e.to_dict() for e in events], indent=2))
        return

    click.echo(f"### {target.strftime('%A, %B %d')}")
    if not events:
        click.echo("  Nothing scheduled.")
    now_shown = now is None
    for event in events:
        if not now_shown and now < event.start_time:
            click.echo(f"  {'-' * 8} now {format_clock(now, use_24h)} {'-' * 8}")
            now_shown = True
        repeat = f" ({event.repeat_option.describe()})" if event.is_template else ""
        tag = click.style(f"[{event.category.value}]", fg=color_rgb(event.category))
        click.echo(
            f"  {format_range(event, use_24h):22} {event.title} {tag} "
            f"{event.id[:8]}{repeat}"
        )
    if not now_shown:
        click.echo(f"  {'-' * 8} now {format_clock(now, use_24h)} {'-' * 8}")


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def day(ctx, target_date: str | None, as_json: bool):
    """Show the events for a day."""
    planner = _planner(ctx)
    target = _target(target_date)
    _show_day(planner.materialize(target), target, as_json, planner.config.use_24h)


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="First day to show (YYYY-MM-DD), defaults to today")
@click.option("--days", "-n", "num_days", default=7, type=click.IntRange(1, 31),
              help="Number of days to show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def week(ctx, target_date: str | None, num_days: int, as_json: bool):
    """Show the events for several days, starting at a date."""
    planner = _planner(ctx)
    start = _target(target_date)
    days = planner.materializer.materialize_range(start, start + timedelta(days=num_days - 1))

    if as_json:
        output = {
            d.isoformat(): [e.to_dict() for e in sort_by_start(events)]
            for d, events in days.items()
        }
        click.echo(json.dumps(output, indent=2))
        return

    for i, (d, events) in enumerate(days.items()):
        if i:
            click.echo()
        _show_day(events, d, as_json=False, use_24h=planner.config.use_24h)


@main.command()
@click.argument("title")
@click.option("--start", "-s", required=True, help="Start time, e.g. 9:00 or 9am")
@click.option("--end", "-e", required=True, help="End time, e.g. 9:30 or 9:30am")
@click.option("--date", "-d", "target_date", default=None, help="Date (YYYY-MM-DD)")
@click.option("--category", "-c", type=CATEGORY_CHOICE, default="other")
@click.option("--repeat", "-r", type=REPEAT_CHOICE, default="none")
@click.option("--days", default=None, help="Weekdays for weekly repeat, e.g. mon,wed")
@click.pass_context
def add(ctx, title, start, end, target_date, category, repeat, days):
    """Create an event."""
    planner = _planner(ctx)
    draft = EventDraft(
        title=title,
        start_time=_clock(start),
        end_time=_clock(end),
        target_date=_target(target_date),
        category=Category(category),
        repeat_option=_repeat(repeat, days),
    )
    try:
        event = planner.create_event(draft)
    except ScheduleError as e:
        _fail(str(e))
    click.echo(f"✓ Added {event.title} ({format_range(event)}) {event.id[:8]}")


@main.command()
@click.argument("ident")
@click.option("--to", "new_start", required=True, help="New start time")
@click.option("--date", "-d", "target_date", default=None, help="Date the event is on")
@click.pass_context
def move(ctx, ident, new_start, target_date):
    """Move an event to a new start time."""
    planner = _planner(ctx)
    target = _target(target_date)
    event = _find_event(planner, target, ident)
    result = planner.engine.commit_move(event, target, _clock(new_start))
    if result is None:
        click.echo("Nothing changed.")
        return
    click.echo(f"✓ {result.title} now {format_range(result)}")


@main.command()
@click.argument("ident")
@click.option("--start", "-s", default=None, help="New start time")
@click.option("--end", "-e", default=None, help="New end time")
@click.option("--date", "-d", "target_date", default=None, help="Date the event is on")
@click.pass_context
def resize(ctx, ident, start, end, target_date):
    """Change an event's start or end time."""
    planner = _planner(ctx)
    target = _target(target_date)
    event = _find_event(planner, target, ident)
    new_start = _clock(start) if start else event.start_time
    new_end = _clock(end) if end else event.end_time
    if new_end <= new_start:
        _fail("End time must be after start time")
    kind = GestureKind.RESIZE_TOP if start and not end else GestureKind.RESIZE_BOTTOM
    result = planner.engine.commit_resize(event, target, new_start, new_end - new_start, kind=kind)
    if result is None:
        click.echo("Nothing changed.")
        return
    click.echo(f"✓ {result.title} now {format_range(result)}")


@main.command()
@click.argument("ident")
@click.option("--date", "-d", "target_date", default=None, help="Date the event is on")
@click.option("--title", "-t", default=None)
@click.option("--start", "-s", default=None)
@click.option("--end", "-e", default=None)
@click.option("--category", "-c", type=CATEGORY_CHOICE, default=None)
@click.option("--repeat", "-r", type=REPEAT_CHOICE, default=None)
@click.option("--days", default=None, help="Weekdays for weekly repeat, e.g. mon,wed")
@click.option("--move-to", "move_to", default=None, help="New date (YYYY-MM-DD)")
@click.option("--all", "all_future", is_flag=True, help="Apply to all future occurrences")
@click.pass_context
def edit(ctx, ident, target_date, title, start, end, category, repeat, days, move_to, all_future):
    """Edit an event, or one or all occurrences of a repeating event."""
    planner = _planner(ctx)
    target = _target(target_date)
    event = _find_event(planner, target, ident)

    draft = EventDraft.from_event(event, target)
    if title is not None:
        draft.title = title
    if start is not None:
        draft.start_time = _clock(start)
    if end is not None:
        draft.end_time = _clock(end)
    if category is not None:
        draft.category = Category(category)
    if repeat is not None:
        draft.repeat_option = _repeat(repeat, days)
    if move_to is not None:
        draft.target_date = _target(move_to)

    scope = SeriesScope.ALL if all_future else SeriesScope.THIS_OCCURRENCE
    try:
        result = planner.engine.edit_event(event, target, draft, scope)
    except ScheduleError as e:
        _fail(str(e))
    if result is None:
        _fail("Event changed while editing, try again")
    click.echo(f"✓ Saved {result.title} ({format_range(result)})")


@main.command()
@click.argument("ident")
@click.option("--date", "-d", "target_date", default=None, help="Date the event is on")
@click.option("--all", "whole_series", is_flag=True, help="Delete every occurrence")
@click.pass_context
def delete(ctx, ident, target_date, whole_series):
    """Delete an event, one occurrence, or a whole series."""
    planner = _planner(ctx)
    target = _target(target_date)
    event = _find_event(planner, target, ident)
    scope = SeriesScope.ALL if whole_series else SeriesScope.THIS_OCCURRENCE
    if not planner.engine.delete_event(event, target, scope):
        _fail("Event changed while deleting, try again")
    click.echo(f"✓ Deleted {event.title}")


@main.command()
@click.option("--date", "-d", "target_date", default=None, help="Date (YYYY-MM-DD)")
@click.pass_context
def seed(ctx, target_date):
    """Fill a day with the sample schedule."""
    planner = _planner(ctx)
    target = _target(target_date)
    for draft in sample_drafts(target):
        planner.create_event(draft)
    click.echo(f"✓ Added sample schedule to {target.isoformat()}")


@main.command()
@click.pass_context
def watch(ctx):
    """Show today's plan and redraw the now line every minute."""
    from apscheduler.schedulers.blocking import BlockingScheduler
    from apscheduler.triggers.cron import CronTrigger

    planner = _planner(ctx)

    def render():
        now = datetime.now()
        target = now.date()
        click.clear()
        _show_day(
            planner.materialize(target),
            target,
            as_json=False,
            use_24h=planner.config.use_24h,
            now=seconds_since_midnight(now),
        )

    render()
    scheduler = BlockingScheduler()
    scheduler.add_job(render, CronTrigger(second=0), id="now_line")
    try:
        scheduler.start()
    except KeyboardInterrupt:
        click.echo("\nStopped.")


if __name__ == "__main__":
    main()
