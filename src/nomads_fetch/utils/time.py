"""Time utilities for NOMADS run resolution.

This module consolidates the date / time helpers used across the package:

* Parsing of compact duration strings (``"50m"``, ``"3.5h"``, ``"1h30m"``)
  used by the model catalog and the ``--horizon`` option.
* Cadence truncation of UTC instants.
* Flexible ``datetime`` parsing for the ``--now`` override.
* Clock, elapsed-time and byte-count formatting for log messages.

.. note::
    This is an internal module.  All datetimes handled here are either
    timezone-aware or naive values that represent UTC.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta

_DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(h|m|s)")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0}
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_duration(value: str | timedelta) -> timedelta:
    """Parse a compact duration string into a timedelta.

    Parameters
    ----------
    value : str or datetime.timedelta
        A sequence of ``<number><unit>`` groups where unit is ``h``, ``m``
        or ``s`` (e.g. ``"18h"``, ``"85m"``, ``"3.5h"``, ``"1h30m"``).
        Timedeltas are returned unchanged.

    Returns
    -------
    datetime.timedelta
        The parsed duration.

    Raises
    ------
    ValueError
        If the string is empty or contains anything but duration groups.

    Examples
    --------
    >>> parse_duration("3.5h")
    datetime.timedelta(seconds=12600)
    >>> parse_duration("1h30m")
    datetime.timedelta(seconds=5400)
    """
    if isinstance(value, timedelta):
        return value

    text = str(value).strip().lower()
    if not text:
        raise ValueError("Duration must not be empty (expected e.g. '18h', '85m', '3.5h')")

    pos = 0
    seconds = 0.0
    for match in _DURATION_RE.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if pos != len(text):
        raise ValueError(f"Cannot parse duration from {value!r} (expected e.g. '18h', '85m')")
    return timedelta(seconds=seconds)


def format_duration(value: timedelta) -> str:
    """Format a timedelta in the compact form accepted by :func:`parse_duration`."""
    total = int(value.total_seconds())
    if total % 3600 == 0:
        return f"{total // 3600}h"
    if total % 60 == 0:
        return f"{total // 60}m"
    return f"{total}s"


def ensure_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def truncate(value: datetime, step: timedelta) -> datetime:
    """Round *value* down to a multiple of *step* counted from the Unix epoch.

    For steps that divide a day evenly (1 h, 6 h, ...) the result is aligned
    to UTC midnight, which is how NOMADS numbers its model cycles.

    Parameters
    ----------
    value : datetime.datetime
        Instant to truncate (naive values are taken as UTC).
    step : datetime.timedelta
        Positive truncation step.

    Returns
    -------
    datetime.datetime
        Aware UTC datetime at or before *value*.
    """
    if step <= timedelta(0):
        raise ValueError(f"Truncation step must be positive, got {step}")
    offset = ensure_utc(value) - _EPOCH
    return _EPOCH + (offset // step) * step


def parse_datetime(value: str | datetime | date) -> datetime:
    """Parse a UTC datetime from various formats.

    Supports:
    - ``datetime`` objects (converted to aware UTC)
    - ``date`` objects (midnight UTC)
    - ISO format strings: ``"2024-06-11T13:45:00"``, ``"2024-06-11T13:45:00+00:00"``
    - Date with time: ``"2024-06-11 13:45"``
    - Compact format: ``"2024061113"`` (``YYYYMMDDHH``)

    Raises
    ------
    ValueError
        If the value cannot be parsed as a datetime.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)

    value_str = str(value).strip()

    try:
        return ensure_utc(datetime.fromisoformat(value_str))
    except ValueError:
        pass

    for fmt in ("%Y-%m-%d %H:%M", "%Y%m%d%H"):
        try:
            return datetime.strptime(value_str, fmt).replace(tzinfo=UTC)
        except ValueError:
            pass

    raise ValueError(
        f"Cannot parse datetime from '{value}'. "
        "Supported formats: '2024-06-11T13:45:00', '2024-06-11 13:45', '2024061113'"
    )


def local_clock(value: datetime) -> str:
    """Format an instant as ``HH:MM`` in the local timezone."""
    return ensure_utc(value).astimezone().strftime("%H:%M")


def format_elapsed(value: timedelta) -> str:
    """Format an elapsed time as ``H:MM:SS``."""
    total = max(int(value.total_seconds()), 0)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def pretty_bytes(size: int) -> str:
    """Format a byte count with binary prefixes (``KiB`` .. ``PiB``)."""
    for exponent, unit in ((5, "PiB"), (4, "TiB"), (3, "GiB"), (2, "MiB"), (1, "KiB")):
        scale = 1024**exponent
        if size > scale:
            return f"{size / scale:.2f}{unit}"
    return f"{size:4d}B"
