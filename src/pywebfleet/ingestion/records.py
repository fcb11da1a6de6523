"""Normalize raw WEBFLEET record lists into canonical models.

Every normalizer is a pure function returning a :class:`NormalizedBatch`:
the records that resolved, sorted chronologically, plus the number of
records that were dropped because a timestamp or coordinate could not
be resolved.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from pywebfleet._constants import MAX_LATITUDE, MAX_LONGITUDE
from pywebfleet.ingestion.normalize import (
    POSITION_TIME_FIELDS,
    STOP_END_FIELDS,
    STOP_START_FIELDS,
    first_present,
    parse_timestamp,
    resolve_duration_minutes,
    safe_float,
    safe_int,
    safe_str,
    to_degrees,
    unwrap_records,
)
from pywebfleet.models.fleet import VehicleSnapshot
from pywebfleet.models.stops import StopEpisode
from pywebfleet.models.track import PositionPoint
from pywebfleet.units import CoordinateEncoding, DurationUnit

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class NormalizedBatch(Generic[T]):
    """Records normalized from one upstream response."""

    records: list[T] = field(default_factory=list)
    dropped: int = 0


Normalizer = Callable[[Any], NormalizedBatch[Any]]


def _coordinates(
    record: Mapping[str, Any],
    encoding: CoordinateEncoding,
) -> tuple[float | None, float | None]:
    latitude = to_degrees(
        record.get("latitude"),
        record.get("latitude_mdeg"),
        encoding=encoding,
        limit=MAX_LATITUDE,
    )
    longitude = to_degrees(
        record.get("longitude"),
        record.get("longitude_mdeg"),
        encoding=encoding,
        limit=MAX_LONGITUDE,
    )
    return latitude, longitude


def _position_from_record(
    record: Mapping[str, Any],
    encoding: CoordinateEncoding,
) -> PositionPoint | None:
    timestamp = parse_timestamp(first_present(record, POSITION_TIME_FIELDS))
    latitude, longitude = _coordinates(record, encoding)
    if timestamp is None or latitude is None or longitude is None:
        return None
    return PositionPoint(
        timestamp=timestamp,
        latitude=latitude,
        longitude=longitude,
        speed=safe_float(record.get("speed")),
        course=safe_float(record.get("course")),
        ignition_state=safe_int(record.get("ignition")),
        standstill=safe_int(record.get("standstill")),
        location_text=safe_str(record.get("postext")),
        location_text_short=safe_str(record.get("postext_short")),
        raw=dict(record),
    )


def _stop_from_record(
    record: Mapping[str, Any],
    encoding: CoordinateEncoding,
    unit: DurationUnit,
) -> StopEpisode | None:
    start = parse_timestamp(first_present(record, STOP_START_FIELDS))
    end = parse_timestamp(first_present(record, STOP_END_FIELDS))
    latitude, longitude = _coordinates(record, encoding)
    if start is None or end is None or latitude is None or longitude is None:
        return None
    if end < start:
        return None
    minutes = resolve_duration_minutes(record.get("duration"), start, end, unit=unit)
    return StopEpisode(
        start=start,
        end=end,
        duration_minutes=minutes if minutes is not None else 0,
        latitude=latitude,
        longitude=longitude,
        address=safe_str(first_present(record, ("postext_short", "postext", "address"))),
        raw=dict(record),
    )


def _normalize(
    raw: Any,
    build: Callable[[Mapping[str, Any]], T | None],
    sort_key: Callable[[T], datetime],
    kind: str,
) -> NormalizedBatch[T]:
    records: list[T] = []
    dropped = 0
    for item in unwrap_records(raw):
        built = build(item) if isinstance(item, Mapping) else None
        if built is None:
            dropped += 1
            continue
        records.append(built)
    # sorted() is stable: equal timestamps keep their response order.
    records = sorted(records, key=sort_key)
    if dropped:
        _logger.debug("Dropped %d unresolvable %s record(s), kept %d", dropped, kind, len(records))
    return NormalizedBatch(records=records, dropped=dropped)


def normalize_positions(
    raw: Any,
    *,
    coordinate_encoding: CoordinateEncoding = CoordinateEncoding.AUTO,
) -> NormalizedBatch[PositionPoint]:
    """Normalize a ``showTracks`` response into positions sorted by time."""
    return _normalize(
        raw,
        lambda record: _position_from_record(record, coordinate_encoding),
        lambda point: point.timestamp,
        "position",
    )


def normalize_stops(
    raw: Any,
    *,
    coordinate_encoding: CoordinateEncoding = CoordinateEncoding.AUTO,
    duration_unit: DurationUnit = DurationUnit.AUTO,
) -> NormalizedBatch[StopEpisode]:
    """Normalize a ``showStops`` response into stops sorted by start."""
    return _normalize(
        raw,
        lambda record: _stop_from_record(record, coordinate_encoding, duration_unit),
        lambda stop: stop.start,
        "stop",
    )


def normalize_fleet(
    raw: Any,
    *,
    coordinate_encoding: CoordinateEncoding = CoordinateEncoding.AUTO,
) -> NormalizedBatch[VehicleSnapshot]:
    """Normalize a ``showObjectReportExtern`` response.

    Vehicles keep the upstream order; those without both coordinates are
    dropped. A missing ``objectno`` is kept as ``None``.
    """
    vehicles: list[VehicleSnapshot] = []
    dropped = 0
    for item in unwrap_records(raw):
        if not isinstance(item, Mapping):
            dropped += 1
            continue
        latitude, longitude = _coordinates(item, coordinate_encoding)
        if latitude is None or longitude is None:
            dropped += 1
            continue
        payload = {**item, "latitude": latitude, "longitude": longitude, "raw": dict(item)}
        try:
            vehicles.append(VehicleSnapshot.model_validate(payload))
        except ValidationError:
            _logger.debug("Vehicle record rejected: objectno=%r", item.get("objectno"), exc_info=True)
            dropped += 1
    if dropped:
        _logger.debug("Dropped %d unresolvable vehicle record(s), kept %d", dropped, len(vehicles))
    return NormalizedBatch(records=vehicles, dropped=dropped)
