"""Utility functions for date manipulation."""

from datetime import datetime

import pytz

from src.common.config.settings import settings


def now_utc() -> datetime:
    """Returns the current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def to_epoch_ms(dt: datetime | None) -> int | None:
    """Converts a datetime to epoch milliseconds (naive values are taken as UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return int(dt.timestamp() * 1000)


def from_epoch_ms(value: int | float | str | None) -> datetime | None:
    """Parses epoch milliseconds (or an ISO string) into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            try:
                dt_obj = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return None
            return dt_obj if dt_obj.tzinfo else pytz.utc.localize(dt_obj)
    try:
        return datetime.fromtimestamp(float(value) / 1000, tz=pytz.utc)
    except (OverflowError, OSError, ValueError):
        return None


def to_store_time(dt: datetime | None) -> datetime | None:
    """Converts a datetime into the shop's local timezone."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.timezone(settings.STORE_TIMEZONE))


def format_store_datetime(dt: datetime | None) -> str:
    """Formats a datetime the way receipts show it (dd/mm/yyyy HH:MM:SS, shop time)."""
    local = to_store_time(dt) or to_store_time(now_utc())
    return local.strftime("%d/%m/%Y %H:%M:%S")
