"""Track (historical positions) retrieval.

Action: ``showTracks``

Presets are fetched day by day with relative day tokens. A custom range
is fetched in a single ``ud`` call and must not exceed 48 hours; wider
ranges are refused with error 9002 rather than split.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from pywebfleet._api._request import build_pattern_request, build_window_request
from pywebfleet._constants import ACTION_SHOW_TRACKS, MAX_WINDOW_SPAN
from pywebfleet._transport import Transport
from pywebfleet.aggregator import RetrievalPlan, execute_plan
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import WebfleetRequestError
from pywebfleet.ingestion.records import normalize_positions
from pywebfleet.models._base import UpstreamErrorSignal
from pywebfleet.models.track import TrackResult
from pywebfleet.ranges import InstantLike, day_patterns, explicit_range, parse_preset, preset_range, utc_now
from pywebfleet.units import DateEncoding

_logger = logging.getLogger(__name__)


def plan_track_retrieval(
    config: WebfleetConfig,
    objectno: str | None,
    *,
    range_from: InstantLike | None = None,
    range_to: InstantLike | None = None,
    preset: str | None = None,
    now: datetime | None = None,
) -> RetrievalPlan | UpstreamErrorSignal:
    """Plan the ``showTracks`` calls for a caller request.

    Raises
    ------
    WebfleetRequestError
        If *objectno* is missing or the explicit range is reversed.
    """
    if objectno is None or not str(objectno).strip():
        raise WebfleetRequestError("objectno is required")
    vehicle = str(objectno).strip()
    tz = config.zone

    if range_from is not None and range_to is not None:
        window = explicit_range(range_from, range_to, tz)
        # showTracks only understands the string form for ud ranges.
        request = build_window_request(
            config,
            ACTION_SHOW_TRACKS,
            vehicle,
            window,
            encoding=DateEncoding.UD_STRING,
            max_span=MAX_WINDOW_SPAN,
        )
        if isinstance(request, UpstreamErrorSignal):
            _logger.debug("Track range for %s rejected: %s", vehicle, request.error_msg)
            return request
        return RetrievalPlan(identifier=vehicle, time_range=window, requests=[request])

    reference = now if now is not None else utc_now()
    resolved = parse_preset(preset, strict=config.strict_presets)
    requests = [
        build_pattern_request(config, ACTION_SHOW_TRACKS, vehicle, pattern)
        for pattern in day_patterns(resolved, now=reference, tz=tz)
    ]
    return RetrievalPlan(
        identifier=vehicle,
        time_range=preset_range(resolved, now=reference, tz=tz),
        requests=requests,
    )


async def fetch_track(
    config: WebfleetConfig,
    transport: Transport,
    objectno: str | None,
    *,
    range_from: InstantLike | None = None,
    range_to: InstantLike | None = None,
    preset: str | None = None,
    now: datetime | None = None,
    timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
) -> TrackResult | UpstreamErrorSignal:
    """Fetch normalized historical positions for a vehicle.

    Parameters
    ----------
    config : WebfleetConfig
        Client configuration.
    transport : Transport
        HTTP transport.
    objectno : str
        Vehicle identifier.
    range_from, range_to : datetime, str or None
        Explicit range (at most 48 hours). Takes precedence over *preset*.
    preset : str or None
        ``today`` (default), ``yesterday``, ``last7`` or ``week_current``.
    now : datetime or None
        Reference instant for presets.
    timeout : float or None
        Seconds after which no further call is started.
    cancel_event : asyncio.Event or None
        Stops further calls when set.

    Returns
    -------
    TrackResult or UpstreamErrorSignal
        Positions in chronological order, or the upstream error.
    """
    plan = plan_track_retrieval(
        config,
        objectno,
        range_from=range_from,
        range_to=range_to,
        preset=preset,
        now=now,
    )
    if isinstance(plan, UpstreamErrorSignal):
        return plan

    outcome = await execute_plan(
        transport,
        plan,
        lambda raw: normalize_positions(raw, coordinate_encoding=config.coordinate_encoding),
        lambda point: point.timestamp,
        request_interval=config.request_interval,
        timeout=timeout,
        cancel_event=cancel_event,
    )
    if isinstance(outcome, UpstreamErrorSignal):
        return outcome

    return TrackResult(
        identifier=plan.identifier,
        range_from=plan.time_range.start,
        range_to=plan.time_range.end,
        records=outcome.records,
        dropped_records=outcome.dropped,
        calls=outcome.calls,
    )
