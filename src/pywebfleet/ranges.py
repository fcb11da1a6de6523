"""Time range resolution and window splitting.

Presets are evaluated in a caller-supplied local zone against an
injectable ``now`` so results are deterministic under test.
"""

from __future__ import annotations

import enum
import logging
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from pywebfleet._constants import MAX_WINDOW_SPAN, WINDOW_SEAM
from pywebfleet.exceptions import WebfleetRequestError
from pywebfleet.models._base import TimeRange

_logger = logging.getLogger(__name__)

# Number of day tokens issued for the ``last7`` preset (d0 .. d-6).
_LAST7_DAYS = 7

InstantLike = datetime | str


class Preset(str, enum.Enum):
    """Named relative time windows."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST7 = "last7"
    WEEK_CURRENT = "week_current"


def parse_preset(token: str | Preset | None, *, strict: bool = False) -> Preset:
    """Resolve a preset token.

    ``None`` means ``today``. Unknown tokens fall back to ``today`` with a
    warning, or raise :class:`WebfleetRequestError` when *strict*.
    """
    if token is None:
        return Preset.TODAY
    if isinstance(token, Preset):
        return token
    try:
        return Preset(token.strip().lower())
    except ValueError:
        if strict:
            raise WebfleetRequestError(f"Unknown preset: {token!r}") from None
        _logger.warning("Unknown preset %r, falling back to %r", token, Preset.TODAY.value)
        return Preset.TODAY


def coerce_instant(value: InstantLike, tz: tzinfo) -> datetime:
    """Turn a datetime or ISO-8601 string into an aware datetime.

    Naive values are interpreted in *tz*. Sub-second precision is dropped.
    """
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise WebfleetRequestError(f"Not an ISO-8601 date-time: {value!r}") from exc
    elif isinstance(value, datetime):
        parsed = value
    else:
        raise WebfleetRequestError(f"Unsupported date-time value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.replace(microsecond=0)


def utc_now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


def _local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _week_start(day: date) -> date:
    """Monday of the week containing *day*."""
    return day - timedelta(days=day.weekday())


def explicit_range(range_from: InstantLike, range_to: InstantLike, tz: tzinfo) -> TimeRange:
    """Build a range from an explicit bound pair."""
    start = coerce_instant(range_from, tz)
    end = coerce_instant(range_to, tz)
    if start > end:
        raise WebfleetRequestError(f"Range start {start.isoformat()} is after its end {end.isoformat()}")
    return TimeRange(start=start, end=end)


def preset_range(preset: Preset, *, now: datetime, tz: tzinfo) -> TimeRange:
    """Resolve a preset to an absolute range."""
    local_now = now.astimezone(tz).replace(microsecond=0)
    today = local_now.date()
    today0 = _local_midnight(today, tz)

    if preset is Preset.YESTERDAY:
        start = _local_midnight(today - timedelta(days=1), tz)
        return TimeRange(start=start, end=today0 - timedelta(seconds=1))
    if preset is Preset.LAST7:
        # Elapsed days, not wall-clock days.
        instant = local_now.astimezone(UTC)
        return TimeRange(start=instant - timedelta(days=7), end=instant)
    if preset is Preset.WEEK_CURRENT:
        return TimeRange(start=_local_midnight(_week_start(today), tz), end=local_now)
    return TimeRange(start=today0, end=local_now)


def resolve_range(
    *,
    preset: str | Preset | None = None,
    range_from: InstantLike | None = None,
    range_to: InstantLike | None = None,
    now: datetime | None = None,
    tz: tzinfo = UTC,
    strict: bool = False,
) -> TimeRange:
    """Resolve a caller request to one absolute :class:`TimeRange`.

    An explicit ``(range_from, range_to)`` pair wins over the preset; a
    lone bound is ignored and the preset applies.

    Parameters
    ----------
    preset : str, Preset or None
        ``today`` (default), ``yesterday``, ``last7`` or ``week_current``.
    range_from, range_to : datetime, str or None
        Explicit bounds; naive values are read in *tz*.
    now : datetime or None
        Reference instant; defaults to the current time.
    tz : tzinfo
        Local zone for calendar-day presets.
    strict : bool
        Reject unknown presets instead of falling back to ``today``.
    """
    if range_from is not None and range_to is not None:
        return explicit_range(range_from, range_to, tz)
    reference = now if now is not None else utc_now()
    return preset_range(parse_preset(preset, strict=strict), now=reference, tz=tz)


def day_patterns(
    preset: str | Preset | None,
    *,
    now: datetime | None = None,
    tz: tzinfo = UTC,
    strict: bool = False,
) -> list[str]:
    """Relative day tokens covering a preset, most recent day first."""
    resolved = parse_preset(preset, strict=strict)
    if resolved is Preset.YESTERDAY:
        return ["d-1"]
    if resolved is Preset.LAST7:
        days = _LAST7_DAYS
    elif resolved is Preset.WEEK_CURRENT:
        reference = now if now is not None else utc_now()
        today = reference.astimezone(tz).date()
        days = (today - _week_start(today)).days + 1
    else:
        days = 1
    return [day_token(offset) for offset in range(days)]


def day_token(offset: int) -> str:
    """Pattern token for *offset* days back (``0`` is today)."""
    if offset < 0:
        raise ValueError("day offset must not be negative")
    return "d0" if offset == 0 else f"d-{offset}"


def split_range(time_range: TimeRange, max_span: timedelta = MAX_WINDOW_SPAN) -> list[TimeRange]:
    """Split *time_range* into consecutive windows of at most *max_span*.

    Each window after the first starts one second after the previous
    window's end so boundary records are not returned twice. An empty
    range (``start >= end``) yields no windows.
    """
    if max_span <= timedelta(0):
        raise ValueError("max_span must be positive")
    windows: list[TimeRange] = []
    cursor = time_range.start
    while cursor < time_range.end:
        window_end = min(cursor + max_span, time_range.end)
        windows.append(TimeRange(start=cursor, end=window_end))
        cursor = window_end + WINDOW_SEAM
    return windows
