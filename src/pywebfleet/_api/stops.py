"""Stop retrieval.

Action: ``showStops``

Unlike tracks, stops are always fetched by explicit windows: the
resolved range (custom or preset) is split into windows of at most 48
hours and each window is one ``ud`` call in the negotiated date
encoding.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from pywebfleet._api._request import UpstreamRequest, build_window_request
from pywebfleet._constants import ACTION_SHOW_STOPS, MAX_WINDOW_SPAN
from pywebfleet._transport import Transport
from pywebfleet.aggregator import RetrievalPlan, execute_plan
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import WebfleetRequestError
from pywebfleet.ingestion.records import normalize_stops
from pywebfleet.models._base import UpstreamErrorSignal
from pywebfleet.models.stops import StopsResult
from pywebfleet.ranges import InstantLike, resolve_range, split_range


def plan_stop_retrieval(
    config: WebfleetConfig,
    objectno: str | None,
    *,
    range_from: InstantLike | None = None,
    range_to: InstantLike | None = None,
    preset: str | None = None,
    now: datetime | None = None,
) -> RetrievalPlan:
    """Plan the ``showStops`` calls for a caller request.

    Raises
    ------
    WebfleetRequestError
        If *objectno* is missing or the explicit range is reversed.
    """
    if objectno is None or not str(objectno).strip():
        raise WebfleetRequestError("objectno is required")
    vehicle = str(objectno).strip()

    time_range = resolve_range(
        preset=preset,
        range_from=range_from,
        range_to=range_to,
        now=now,
        tz=config.zone,
        strict=config.strict_presets,
    )
    requests: list[UpstreamRequest] = []
    for window in split_range(time_range, MAX_WINDOW_SPAN):
        request = build_window_request(config, ACTION_SHOW_STOPS, vehicle, window, max_span=MAX_WINDOW_SPAN)
        if not isinstance(request, UpstreamRequest):
            raise WebfleetRequestError(
                f"Stop window {window.start.isoformat()} .. {window.end.isoformat()} exceeds {MAX_WINDOW_SPAN}"
            )
        requests.append(request)
    return RetrievalPlan(identifier=vehicle, time_range=time_range, requests=requests)


async def fetch_stops(
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
) -> StopsResult | UpstreamErrorSignal:
    """Fetch normalized stops for a vehicle over any range length."""
    plan = plan_stop_retrieval(
        config,
        objectno,
        range_from=range_from,
        range_to=range_to,
        preset=preset,
        now=now,
    )
    outcome = await execute_plan(
        transport,
        plan,
        lambda raw: normalize_stops(
            raw,
            coordinate_encoding=config.coordinate_encoding,
            duration_unit=config.duration_unit,
        ),
        lambda stop: stop.start,
        request_interval=config.request_interval,
        timeout=timeout,
        cancel_event=cancel_event,
    )
    if isinstance(outcome, UpstreamErrorSignal):
        return outcome

    return StopsResult(
        identifier=plan.identifier,
        range_from=plan.time_range.start,
        range_to=plan.time_range.end,
        records=outcome.records,
        dropped_records=outcome.dropped,
        calls=outcome.calls,
    )
