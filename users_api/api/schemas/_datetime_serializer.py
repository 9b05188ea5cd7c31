# users_api/api/schemas/_datetime_serializer.py
from datetime import datetime, timezone


def _as_utc(dt: datetime) -> datetime:
    # o banco guarda UTC sem tzinfo
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_display_datetime(dt: datetime | None, *, with_seconds: bool = True) -> str | None:
    """Human readable en-US rendering, e.g. 'Monday, January 5, 2026, 03:04:05 PM UTC'."""
    if dt is None:
        return None

    dt = _as_utc(dt)
    time_fmt = "%I:%M:%S %p" if with_seconds else "%I:%M %p"
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}, {dt.strftime(time_fmt)} UTC"
