"""Duration parsing and formatting."""

import re
from datetime import datetime, timedelta, timezone

SECS_IN_MINUTE = 60
SECS_IN_HOUR = SECS_IN_MINUTE * 60
SECS_IN_DAY = SECS_IN_HOUR * 24
SECS_IN_MONTH = SECS_IN_DAY * 30
SECS_IN_YEAR = SECS_IN_MONTH * 12

_DURATION_TOKEN = re.compile(r"(\d+)(d|h|m|s)", re.IGNORECASE)
_UNIT_PATTERNS = {
    "d": (re.compile(r"(\d+)d", re.IGNORECASE), 86_400_000),
    "h": (re.compile(r"(\d+)h", re.IGNORECASE), 3_600_000),
    "m": (re.compile(r"(\d+)m", re.IGNORECASE), 60_000),
    "s": (re.compile(r"(\d+)s", re.IGNORECASE), 1_000),
}


def parse_duration(text: str) -> int | None:
    """
    Convert a duration token such as ``1d2h3m`` to milliseconds.

    Args:
        text: The token to convert. Units may appear in any order.

    Returns:
        The duration in milliseconds, ``0`` for a single-character token, or
        ``None`` when the token is empty, carries no unit, or would overflow
        a date.
    """
    if not text:
        return None
    if len(text) < 2:
        return 0
    if not _DURATION_TOKEN.search(text):
        return None

    duration = 0
    for pattern, factor in _UNIT_PATTERNS.values():
        match = pattern.search(text)
        if match:
            duration += int(match.group(1)) * factor

    try:
        datetime.now(timezone.utc) + timedelta(milliseconds=duration)
    except OverflowError:
        return None
    return duration


def format_duration(duration: int | float, bold: bool = False) -> str:
    """
    Convert milliseconds to a readable duration.

    Months are 30 days and years 12 months, so long durations drift from the
    calendar.

    Args:
        duration: The duration in milliseconds
        bold: Whether to wrap each number in Markdown bold markers

    Returns:
        Units in descending order joined with ``, ``, zero units omitted
    """
    if duration < 1000:
        return "less than a second"

    delta = duration / 1000
    years = int(delta // SECS_IN_YEAR)
    delta -= years * SECS_IN_YEAR
    months = int(delta // SECS_IN_MONTH) % 12
    delta -= months * SECS_IN_MONTH
    days = int(delta // SECS_IN_DAY) % 30
    delta -= days * SECS_IN_DAY
    hours = int(delta // SECS_IN_HOUR) % 24
    delta -= hours * SECS_IN_HOUR
    minutes = int(delta // SECS_IN_MINUTE) % 60
    delta -= minutes * SECS_IN_MINUTE
    seconds = int(delta)

    parts = []
    for value, unit in (
        (years, "year"),
        (months, "month"),
        (days, "day"),
        (hours, "hour"),
        (minutes, "minute"),
        (seconds, "second"),
    ):
        if value > 0:
            number = f"**{value}**" if bold else str(value)
            parts.append(f"{number} {unit}{'s' if value > 1 else ''}")

    return ", ".join(parts)


def format_digit(n: int, length: int = 2) -> str:
    """Zero-pad ``n`` to ``length`` digits, keeping the sign in front."""
    return f"{'-' if n < 0 else ''}{abs(n):0{length}d}"


def format_time(date: datetime | None = None, seconds: bool = True, milliseconds: bool = False) -> str:
    """``hh:mm[:ss][.SSS]`` of ``date``, now by default."""
    date = date or datetime.now()
    formatted = f"{format_digit(date.hour)}:{format_digit(date.minute)}"
    if seconds:
        formatted += f":{format_digit(date.second)}"
    if milliseconds:
        formatted += f".{format_digit(date.microsecond // 1000, 3)}"
    return formatted


def format_date(date: datetime | None = None) -> str:
    """``YYYY-MM-DD`` of ``date``, today by default."""
    date = date or datetime.now()
    return f"{date.year}-{format_digit(date.month)}-{format_digit(date.day)}"
