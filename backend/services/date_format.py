"""
Date formatting for album headers and the cover page.

Album dates are ISO strings: `YYYY-MM-DD`, optionally with a time part
(`YYYY-MM-DDTHH:MM[:SS[.ffffff]][Z|±HH:MM]`) when the album holds a single
timestamped photo.
"""
import re
from datetime import datetime, timezone
from typing import Optional

_FRACTION = re.compile(r"\.(\d+)")
_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def has_time_component(value: str) -> bool:
    return "T" in (value or "")


def to_date_only(value: str) -> str:
    return (value or "").split("T")[0]


def _normalise_iso(value: str) -> str:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 fractional digits
    return _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], value, count=1)


def parse_album_date(value: str, as_utc: bool = False) -> datetime:
    """
    Parse an album date.

    Values with an offset keep their wall-clock time unless `as_utc` is
    set, in which case they are converted to UTC first. The result is
    always naive.

    Raises:
        ValueError: if the value is not an ISO date or datetime
    """
    value = (value or "").strip()
    if not has_time_component(value):
        return datetime.strptime(value, "%Y-%m-%d")
    parsed = datetime.fromisoformat(_normalise_iso(value))
    if parsed.tzinfo is not None and as_utc:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def format_date(value: str) -> str:
    """`March 1, 2024 (Fri)`"""
    d = parse_album_date(to_date_only(value))
    return f"{_MONTHS[d.month - 1]} {d.day}, {d.year} ({_WEEKDAYS[d.weekday()]})"


def format_date_time(value: str) -> str:
    """`March 1, 2024 (Fri) 2:30 PM`"""
    d = parse_album_date(value)
    ampm = "AM" if d.hour < 12 else "PM"
    hour12 = d.hour % 12 or 12
    return f"{format_date(value)} {hour12}:{d.minute:02d} {ampm}"


def format_date_range(start: str, end: str) -> str:
    s = parse_album_date(to_date_only(start))
    e = parse_album_date(to_date_only(end))
    start_label = f"{_MONTHS[s.month - 1]} {s.day}"
    if s.year == e.year:
        if s.month == e.month:
            return f"{start_label} ~ {e.day}, {s.year}"
        return f"{start_label} ~ {_MONTHS[e.month - 1]} {e.day}, {s.year}"
    return f"{start_label}, {s.year} ~ {_MONTHS[e.month - 1]} {e.day}, {e.year}"


def format_album_date(date: str, date_end: Optional[str] = None) -> str:
    """
    Header date for an album.

    - range when `date_end` is set and falls on a different day
    - date and time when `date` carries a time component
    - date only otherwise
    """
    if date_end and to_date_only(date_end) != to_date_only(date):
        return format_date_range(date, date_end)
    if has_time_component(date):
        return format_date_time(date)
    return format_date(date)
