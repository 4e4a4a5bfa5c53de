"""Turn 'H:MM' times and an optional 'YYYY-MM-DD' date into an entry window.

The window keeps both the local instants (for display) and their UTC
equivalents (for the request). End before start is accepted on purpose.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Tuple

from dateutil import tz

from .errors import ResolutionError

DATE_LAYOUT = "%Y-%m-%d"
LOCAL_DISPLAY = "%Y-%m-%d %I:%M:%S %p %Z"
UTC_DISPLAY = "%Y-%m-%d %H:%M:%S UTC"

_HOUR_MINUTE = re.compile(r"^\s*(\d+):(\d+)\s*$")
_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime
    start_utc: datetime
    end_utc: datetime

    @classmethod
    def from_local(cls, start: datetime, end: datetime) -> "TimeWindow":
        return cls(start, end, start.astimezone(timezone.utc), end.astimezone(timezone.utc))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def hours(self) -> float:
        return self.duration.total_seconds() / 3600.0


def parse_hour_minute(s: str, field: str) -> Tuple[int, int]:
    """Parse 'H:MM' into (hour, minute); field names the setting in errors."""
    m = _HOUR_MINUTE.match(s or "")
    if not m:
        raise ResolutionError(f"invalid {field} format: {s!r} (expected H:MM)", field=field)
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise ResolutionError(f"invalid {field} format: {s!r} is not a time of day", field=field)
    return hour, minute


def parse_date_override(s: str) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string; empty means no override."""
    if not s or not s.strip():
        return None
    if not _DATE_SHAPE.match(s.strip()):
        raise ResolutionError(f"invalid date format: {s!r} (expected YYYY-MM-DD)", field="date")
    try:
        return datetime.strptime(s.strip(), DATE_LAYOUT).date()
    except ValueError as e:
        raise ResolutionError(f"invalid date format: {s!r} (expected YYYY-MM-DD)", field="date") from e


def resolve_window(start_text: str, end_text: str, date_override: str = "",
                   now: Optional[datetime] = None, local_tz: Optional[tzinfo] = None) -> TimeWindow:
    local_tz = local_tz or tz.tzlocal()
    start_hour, start_min = parse_hour_minute(start_text, "start_time")
    end_hour, end_min = parse_hour_minute(end_text, "end_time")
    day = parse_date_override(date_override)
    if day is None:
        day = (now or datetime.now(tz=local_tz)).astimezone(local_tz).date()
    start = datetime(day.year, day.month, day.day, start_hour, start_min, tzinfo=local_tz)
    end = datetime(day.year, day.month, day.day, end_hour, end_min, tzinfo=local_tz)
    return TimeWindow.from_local(start, end)


def format_duration(d: timedelta) -> str:
    """Render a duration as '<H>h <M>m', or '<M>m' under one hour.

    Both parts truncate toward zero, so negative durations keep their sign.
    """
    minutes_total = int(d.total_seconds() / 60)
    hours = int(minutes_total / 60)
    minutes = minutes_total - hours * 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
