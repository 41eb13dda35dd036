#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Conversions between minute offsets used by the replay and wall-clock time."""

import datetime
import re

from dateutil import parser as date_parser

from tablereplay.constants import CLOCK_FORMAT, STAMP_FORMAT
from tablereplay.exceptions import ParseError

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def shift_by(base: datetime.datetime, minutes: float) -> datetime.datetime:
    return base + datetime.timedelta(minutes=minutes)


def offset_to_clock(minutes: float, base: datetime.datetime) -> str:
    """Format `base` shifted by `minutes` as a 24-hour HH:MM string."""
    return shift_by(base, minutes).strftime(CLOCK_FORMAT)


def format_stamp(stamp: datetime.datetime) -> str:
    """Format a timestamp as YYYY-MM-DD HH:MM."""
    return stamp.strftime(STAMP_FORMAT)


def clock_to_minutes(clock: str) -> int:
    """Convert an HH:MM (optionally HH:MM:SS) string to minutes after midnight.

    Raises
    ------
    ParseError
        If `clock` is not a valid time of the day.
    """
    match = _CLOCK_PATTERN.match(clock or "")
    if match is None:
        raise ParseError(f"Malformed time of day: {clock!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ParseError(f"Time of day out of range: {clock!r}")
    return hours * 60 + minutes


def minutes_between(start: datetime.datetime, end: datetime.datetime) -> float:
    """Signed number of minutes from `start` to `end`."""
    return (end - start).total_seconds() / 60


def combine_date_time(date_str: str, time_str: str) -> datetime.datetime:
    """Parse a date (YYYY-MM-DD) and a time (HH:MM[:SS]) into a single timestamp.

    Raises
    ------
    ParseError
        If the fields do not form a valid ISO timestamp, or carry a UTC offset.
        Exports hold naive local times only.
    """
    try:
        stamp = date_parser.isoparse(f"{date_str.strip()}T{time_str.strip()}")
    except (ValueError, AttributeError) as e:
        raise ParseError(
            f"Could not parse timestamp from {date_str!r} and {time_str!r}"
        ) from e
    if stamp.tzinfo is not None:
        raise ParseError(
            f"Timestamp from {date_str!r} and {time_str!r} has a UTC offset"
        )
    return stamp
