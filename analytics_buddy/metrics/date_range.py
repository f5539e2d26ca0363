"""
Date Range Resolution

Maps dashboard range tokens (today, 7days, lastMonth, ...) to concrete,
millisecond-precision [start, end] instants. Every token resolves; unknown
tokens fall back to the 30 day window.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

DEFAULT_RANGE = "30days"

# token -> trailing window in days
ROLLING_WINDOWS = {
    "7days": 7,
    "last7Days": 7,
    "30days": 30,
    "last30Days": 30,
    "90days": 90,
    "last90Days": 90,
}

RANGE_TOKENS: Tuple[str, ...] = (
    "today",
    "yesterday",
    *ROLLING_WINDOWS,
    "thisMonth",
    "lastMonth",
)


@dataclass(frozen=True)
class DateRange:
    """Resolved, inclusive date window"""
    token: str
    start: datetime
    end: datetime
    
    @property
    def start_iso(self) -> str:
        return format_instant(self.start)
    
    @property
    def end_iso(self) -> str:
        return format_instant(self.end)


def elapsed_before(moment: datetime, delta: timedelta) -> datetime:
    """
    Step back by an exact elapsed duration.
    
    Aware datetime arithmetic follows the wall clock, so the subtraction
    runs in UTC and the result is converted back to the original zone.
    """
    return (moment.astimezone(timezone.utc) - delta).astimezone(moment.tzinfo)


def elapsed_after(moment: datetime, delta: timedelta) -> datetime:
    return (moment.astimezone(timezone.utc) + delta).astimezone(moment.tzinfo)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def format_instant(moment: datetime) -> str:
    """Render an instant as a UTC ISO-8601 string with millisecond precision."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def utc_date(moment: datetime) -> date:
    """Calendar date of an instant in UTC, as used for data point labels."""
    return moment.astimezone(timezone.utc).date()


def current_time(tz_name: str = "UTC") -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def resolve_range(token: Optional[str], now: datetime) -> DateRange:
    """
    Resolve a range token against a reference instant.
    
    Naive ``now`` values are interpreted as UTC. The result is a pure
    function of ``(token, now)``.
    
    ``yesterday`` and the rolling windows subtract an exact elapsed duration
    (N x 24 hours) from ``now`` before truncating to midnight, so across a
    DST transition they can land a calendar day away from plain date
    arithmetic.
    
    Args:
        token: Range token; None or unknown tokens resolve as ``30days``
        now: Reference instant
        
    Returns:
        DateRange with inclusive start and end
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    
    token = token or DEFAULT_RANGE
    end = end_of_day(now)
    
    if token == "today":
        start = start_of_day(now)
    elif token == "yesterday":
        start = start_of_day(elapsed_before(now, timedelta(hours=24)))
        end = elapsed_after(start, timedelta(hours=24) - timedelta(milliseconds=1))
    elif token in ROLLING_WINDOWS:
        start = start_of_day(elapsed_before(now, timedelta(days=ROLLING_WINDOWS[token])))
    elif token == "thisMonth":
        start = start_of_day(now.replace(day=1))
    elif token == "lastMonth":
        last_day = start_of_day(now.replace(day=1)) - timedelta(days=1)
        start = last_day.replace(day=1)
        end = end_of_day(last_day)
    else:
        start = start_of_day(elapsed_before(now, timedelta(days=ROLLING_WINDOWS[DEFAULT_RANGE])))
    
    return DateRange(token=token, start=start, end=end)
