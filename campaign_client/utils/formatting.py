"""Display formatting for server timestamps.

Report timestamps arrive as RFC 1123 text (e.g. "Mon, 16 Feb 2026 15:35:52 GMT")
but already carry wall-clock time in the display zone. They are rewritten by
string surgery only; the instant is never converted.
"""

import re
from enum import Enum

_TIMESTAMP_RE = re.compile(r"^(\w+),\s+(\d+)\s+(\w+)\s+(\d+)\s+(\d+):(\d+):(\d+)")
_ZONE_SUFFIX_RE = re.compile(r" GMT.*$")


class TimestampStyle(str, Enum):
    """Supported display layouts."""

    DAY_FIRST = "day_first"  # Mon, 16 Feb 2026 3:35 PM IST
    MONTH_FIRST = "month_first"  # Feb 16, 2026 @ 3:35 PM IST


def _to_12_hour(hours24: str) -> tuple[int, str]:
    hours = int(hours24)
    meridiem = "PM" if hours >= 12 else "AM"
    return hours % 12 or 12, meridiem


def format_timestamp(
    value: str,
    style: TimestampStyle = TimestampStyle.DAY_FIRST,
    zone_label: str = "IST",
) -> str:
    """Format a server timestamp for display without timezone conversion.

    Args:
        value: Timestamp text as returned by the report endpoint
        style: Output layout
        zone_label: Zone name appended to the output

    Returns:
        Display string; unparseable input keeps its text minus any GMT suffix
    """
    match = _TIMESTAMP_RE.match(value)
    if not match:
        return f"{_ZONE_SUFFIX_RE.sub('', value)} {zone_label}"

    day_name, day, month, year, hours24, minutes, _seconds = match.groups()
    hours, meridiem = _to_12_hour(hours24)

    if style == TimestampStyle.MONTH_FIRST:
        return f"{month} {day}, {year} @ {hours}:{minutes} {meridiem} {zone_label}"
    return f"{day_name}, {day} {month} {year} {hours}:{minutes} {meridiem} {zone_label}"
