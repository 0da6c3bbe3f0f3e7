"""Presentation helpers: clock labels and category colors."""

from datetime import date

from .core.events import Category, Event, EventDraft
from .core.timegrid import SECONDS_PER_DAY, SECONDS_PER_HOUR

CATEGORY_COLORS = {
    Category.APPOINTMENT: "#5856D6",
    Category.ERRANDS: "#A2845E",
    Category.EXERCISE: "#34C759",
    Category.FAMILY: "#FF2D55",
    Category.MEAL: "#FF9500",
    Category.MEETING: "#007AFF",
    Category.PERSONAL: "#AF52DE",
    Category.REST: "#5AC8FA",
    Category.SOCIAL: "#FFCC00",
    Category.STUDY: "#30B0C7",
    Category.TRAVEL: "#00C7BE",
    Category.WORK: "#32ADE6",
    Category.OTHER: "#8E8E93",
}

# Title, start, duration (seconds), category
SAMPLE_SCHEDULE = [
    ("Morning Standup", 9 * 3600, 1800, Category.MEETING),
    ("Design Review", 11 * 3600, 3600, Category.WORK),
    ("Lunch", 12.5 * 3600, 3600, Category.MEAL),
    ("Focused Work", 14 * 3600, 7200, Category.WORK),
    ("Team Sync", 16.5 * 3600, 1800, Category.MEETING),
]


def color_for(category: Category) -> str:
    return CATEGORY_COLORS[category]


def color_rgb(category: Category) -> tuple[int, int, int]:
    """Category color as an (r, g, b) tuple for terminal styling."""
    hex_color = color_for(category)
    return tuple(int(hex_color[i:i + 2], 16) for i in (1, 3, 5))


def format_clock(seconds: float, use_24h: bool = False) -> str:
    """Format seconds from midnight as '9:05 AM' (or '09:05')."""
    total_minutes = int(seconds // 60) % (SECONDS_PER_DAY // 60)
    hour, minute = divmod(total_minutes, 60)
    if use_24h:
        return f"{hour:02d}:{minute:02d}"
    ampm = "AM" if hour < 12 else "PM"
    display_hour = 12 if hour % 12 == 0 else hour % 12
    return f"{display_hour}:{minute:02d} {ampm}"


def format_range(event: Event, use_24h: bool = False) -> str:
    return f"{format_clock(event.start_time, use_24h)} - {format_clock(event.end_time, use_24h)}"


def parse_clock(value: str) -> int:
    """
    Parse a wall-clock time into seconds from midnight.

    Accepts '14:30', '9:05', '9am', '9:30 PM' and '24:00' (end of day).
    """
    text = value.strip().lower().replace(" ", "")
    suffix = None
    if text.endswith(("am", "pm")):
        suffix, text = text[-2:], text[:-2]
    hour_str, _, minute_str = text.partition(":")
    try:
        hour = int(hour_str)
        minute = int(minute_str) if minute_str else 0
    except ValueError:
        raise ValueError(f"Invalid time: {value!r}")
    if suffix:
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid time: {value!r}")
        hour = hour % 12 + (12 if suffix == "pm" else 0)
    if not 0 <= minute < 60 or not 0 <= hour <= 24 or (hour == 24 and minute):
        raise ValueError(f"Invalid time: {value!r}")
    return hour * SECONDS_PER_HOUR + minute * 60


def sample_drafts(target_date: date) -> list[EventDraft]:
    """Drafts for the sample schedule on a date."""
    return [
        EventDraft(
            title=title,
            start_time=start,
            end_time=start + duration,
            target_date=target_date,
            category=category,
        )
        for title, start, duration, category in SAMPLE_SCHEDULE
    ]
