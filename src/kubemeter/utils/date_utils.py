import re
from datetime import datetime, timedelta, timezone
from typing import Union

from kubemeter.core.exceptions import ParseError

_DURATION_PART = re.compile(r"(\d+)(ms|s|m|h)")
_DURATION = re.compile(r"^(\d+(ms|s|m|h))+$")
_UNITS = {"ms": "milliseconds", "s": "seconds", "m": "minutes", "h": "hours"}


def parse_unix_timestamp(value: str, name: str = "time") -> datetime:
    """
    Parses a unix timestamp in whole seconds into an aware UTC datetime.

    Raises:
        ParseError: If the value is not an integer.
    """
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        raise ParseError(f"Invalid parameter '{name}': {value!r} is not a unix timestamp.") from None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ParseError(f"Invalid parameter '{name}': {value!r} is out of range.") from e


def parse_duration(value: str, name: str = "step") -> timedelta:
    """
    Parses a duration such as '90s', '10m' or '1h30m'.

    Raises:
        ParseError: If the value is not a valid duration.
    """
    text = (value or "").strip().lower()
    if not _DURATION.match(text):
        raise ParseError(f"Invalid parameter '{name}': {value!r} is not a duration.")

    delta = timedelta()
    for amount, unit in _DURATION_PART.findall(text):
        delta += timedelta(**{_UNITS[unit]: int(amount)})
    return delta


def ensure_utc(dt: Union[datetime, float, int]) -> datetime:
    """
    Ensures a datetime object is timezone-aware and in UTC.
    Numbers are read as unix timestamps; naive datetimes are assumed to be UTC.
    """
    if isinstance(dt, (int, float)):
        return datetime.fromtimestamp(dt, tz=timezone.utc)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt
