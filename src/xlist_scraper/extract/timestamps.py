"""Timestamp helpers for the canonical ``Tue Nov 04 19:06:32 +0000 2025`` format."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import re

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_CANONICAL_RE = re.compile(
    r"^(\w{3}) (\w{3}) (\d{2}) (\d{2}):(\d{2}):(\d{2}) \+0000 (\d{4})$"
)
_RELATIVE_RE = re.compile(r"^(\d+)([smhd])$")
_RELATIVE_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def format_twitter_timestamp(value: datetime) -> str:
    """Format a datetime in UTC using locale-independent day and month names."""
    moment = _to_utc(value)
    return (
        f"{_DAYS[moment.weekday()]} {_MONTHS[moment.month - 1]} {moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} +0000 {moment.year}"
    )


def parse_twitter_date(value: str | None) -> datetime | None:
    """Parse ISO-8601 or canonical timestamps into aware UTC datetimes."""
    if not value:
        return None
    raw = value.strip()
    if not raw:
        return None

    iso = f"{raw[:-1]}+00:00" if raw.endswith("Z") else raw
    try:
        return _to_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass

    match = _CANONICAL_RE.fullmatch(raw)
    if match is None:
        return None
    _, month_name, day, hour, minute, second, year = match.groups()
    if month_name not in _MONTHS:
        return None
    try:
        return datetime(
            int(year),
            _MONTHS.index(month_name) + 1,
            int(day),
            int(hour),
            int(minute),
            int(second),
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None


def normalize_timestamp(value: str) -> str:
    parsed = parse_twitter_date(value)
    if parsed is None:
        return value
    return format_twitter_timestamp(parsed)


def parse_relative_time(text: str | None, now: datetime | None = None) -> datetime:
    """Resolve labels like ``2h`` against ``now``; anything else resolves to ``now``."""
    reference = _to_utc(now) if now is not None else datetime.now(timezone.utc)
    if not text:
        return reference
    match = _RELATIVE_RE.fullmatch(text.strip())
    if match is None:
        return reference
    amount, unit = match.groups()
    return reference - timedelta(**{_RELATIVE_UNITS[unit]: int(amount)})


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
