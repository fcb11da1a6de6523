"""Normalization helpers.

Centralizes defensive parsing of WEBFLEET record fields: numbers that
arrive as strings, timestamps in several encodings, coordinates in
decimal degrees or microdegrees and durations in seconds or minutes.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pywebfleet._constants import (
    DURATION_SECONDS_THRESHOLD,
    MICRODEGREE_SCALE,
    UD_DATE_FORMAT,
)
from pywebfleet.units import CoordinateEncoding, DurationUnit

# Candidate timestamp fields, most preferred first.
POSITION_TIME_FIELDS: tuple[str, ...] = ("pos_time", "time", "receivetime", "msgtime")
STOP_START_FIELDS: tuple[str, ...] = ("starttime", "start_time", "begin_time", "time_begin", "timefrom", "from")
STOP_END_FIELDS: tuple[str, ...] = ("endtime", "end_time", "time_end", "timeto", "to")

# Keys under which WEBFLEET wraps record lists.
_WRAPPER_KEYS: tuple[str, ...] = ("report", "data", "items")

# Epoch values above this are milliseconds.
_MS_THRESHOLD = 1e11


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def non_negative_or_zero(value: Any) -> int | None:
    parsed = safe_int(value)
    if parsed is None:
        return None
    return 0 if parsed < 0 else parsed


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def first_present(record: Mapping[str, Any], fields: Iterable[str]) -> Any:
    """Return the value of the first field that is present and non-empty."""
    for name in fields:
        value = record.get(name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def unwrap_records(raw: Any) -> list[Any]:
    """Return the record list of a response.

    WEBFLEET answers with either a bare list or an object wrapping the
    list (usually under ``report``). Any other shape yields no records.
    """
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        for key in _WRAPPER_KEYS:
            nested = raw.get(key)
            if isinstance(nested, list):
                return nested
    return []


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a WEBFLEET timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (``Z``, explicit offset or naive, which is
    taken as UTC), ``dd/MM/yyyy HH:mm:ss`` strings (UTC) and epoch
    seconds or milliseconds. Returns ``None`` for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed_epoch = _from_epoch(float(value))
        if parsed_epoch is None:
            return None
        parsed = parsed_epoch
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed_text = _from_text(text)
        if parsed_text is None:
            return None
        parsed = parsed_text
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _from_text(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, UD_DATE_FORMAT)
    except ValueError:
        pass
    epoch = safe_float(text)
    if epoch is None:
        return None
    return _from_epoch(epoch)


def _from_epoch(value: float) -> datetime | None:
    if math.isnan(value) or math.isinf(value) or value <= 0:
        return None
    if value > _MS_THRESHOLD:
        value /= 1000.0
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def to_degrees(
    dec: Any,
    mdeg: Any = None,
    *,
    encoding: CoordinateEncoding = CoordinateEncoding.AUTO,
    limit: float = 180.0,
) -> float | None:
    """Resolve one coordinate to decimal degrees.

    A numeric ``mdeg`` (microdegrees) always wins. Otherwise ``dec`` is
    used as-is, or divided by 1 000 000 when *encoding* says so; with
    ``AUTO`` that happens when its magnitude exceeds 180. Results outside
    ``[-limit, limit]`` are rejected.
    """
    micro = safe_float(mdeg)
    if micro is not None:
        degrees = micro / MICRODEGREE_SCALE
    else:
        value = safe_float(dec)
        if value is None:
            return None
        if encoding is CoordinateEncoding.MICRODEGREE or (
            encoding is CoordinateEncoding.AUTO and abs(value) > 180.0
        ):
            degrees = value / MICRODEGREE_SCALE
        else:
            degrees = value
    if abs(degrees) > limit:
        return None
    return degrees


def resolve_duration_minutes(
    duration: Any,
    start: datetime | None,
    end: datetime | None,
    *,
    unit: DurationUnit = DurationUnit.AUTO,
) -> int | None:
    """Resolve a stop duration to whole minutes.

    An explicit numeric *duration* is converted according to *unit*
    (``AUTO``: above 10 000 means seconds). Without one, the duration is
    derived from ``end - start``. Negative results clamp to zero.
    """
    value = safe_float(duration)
    if value is not None:
        as_seconds = unit is DurationUnit.SECONDS or (
            unit is DurationUnit.AUTO and value > DURATION_SECONDS_THRESHOLD
        )
        minutes = round_half_up(value / 60.0) if as_seconds else round_half_up(value)
        return non_negative_or_zero(minutes)
    if start is None or end is None:
        return None
    return non_negative_or_zero(round_half_up((end - start).total_seconds() / 60.0))
