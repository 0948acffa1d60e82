# tests/utils/test_date_utils.py

from datetime import datetime, timedelta, timezone

import pytest

from kubemeter.core.exceptions import ParseError
from kubemeter.utils.date_utils import ensure_utc, parse_duration, parse_unix_timestamp


def test_parse_unix_timestamp():
    assert parse_unix_timestamp("1585836666") == datetime(2020, 4, 2, 14, 11, 6, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["", "abc", "1585836666.5", None, "99999999999999999999"])
def test_parse_unix_timestamp_invalid(value):
    with pytest.raises(ParseError):
        parse_unix_timestamp(value, "start")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("10m", timedelta(minutes=10)),
        ("1h", timedelta(hours=1)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("90s", timedelta(seconds=90)),
        ("500ms", timedelta(milliseconds=500)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "10", "1d", "m10", "1h 30m"])
def test_parse_duration_invalid(value):
    with pytest.raises(ParseError):
        parse_duration(value)


def test_ensure_utc():
    naive = datetime(2020, 1, 1, 12, 0)
    assert ensure_utc(naive).tzinfo == timezone.utc
    offset = datetime(2020, 1, 1, 13, 0, tzinfo=timezone(timedelta(hours=1)))
    assert ensure_utc(offset) == datetime(2020, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert ensure_utc(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
