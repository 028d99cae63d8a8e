"""Date helpers for bid deadline checks."""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def resolve_timezone(name: str) -> tzinfo:
    if not name or name.upper() in {"UTC", "Z"}:
        return timezone.utc
    return ZoneInfo(name)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today(tz: tzinfo) -> date:
    """Return the current calendar date in ``tz``."""
    return datetime.now(tz).date()


def parse_datetime(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def deadline_date(value: date | datetime | str, tz: tzinfo) -> date:
    """Truncate a product deadline to a calendar date in ``tz``.

    Date-only values and naive datetimes are taken as already local to ``tz``.
    """
    if isinstance(value, str):
        value = parse_datetime(value) if "T" in value or " " in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def is_past_deadline(deadline: date | datetime | str, current: date, tz: tzinfo) -> bool:
    return deadline_date(deadline, tz) < current
