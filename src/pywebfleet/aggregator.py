"""Sequential multi-call retrieval.

A :class:`RetrievalPlan` lists the upstream calls that together cover a
caller's range. :func:`execute_plan` issues them one at a time, stops at
the first business error, and merges the normalized records into one
chronological sequence.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from pywebfleet._api._common import extract_error_signal, fetch_raw
from pywebfleet._api._request import UpstreamRequest
from pywebfleet._transport import Transport
from pywebfleet.exceptions import WebfleetCancelledError
from pywebfleet.ingestion.records import NormalizedBatch
from pywebfleet.models._base import TimeRange, UpstreamErrorSignal

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetrievalPlan:
    """The calls needed to cover one vehicle's range.

    Parameters
    ----------
    identifier : str
        Vehicle identifier (``objectno``).
    time_range : TimeRange
        Resolved overall range reported back to the caller.
    requests : list[UpstreamRequest]
        Calls to issue, in order.
    """

    identifier: str
    time_range: TimeRange
    requests: list[UpstreamRequest] = field(default_factory=list)


@dataclass(frozen=True)
class AggregateOutcome(Generic[T]):
    """Merged result of a fully successful plan."""

    records: list[T]
    dropped: int
    calls: int


class _Cancellation:
    """Deadline/cancel-event check performed before every call."""

    def __init__(self, timeout: float | None, cancel_event: asyncio.Event | None) -> None:
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._event = cancel_event

    def check(self, calls_issued: int, remaining: int) -> None:
        if self._event is not None and self._event.is_set():
            raise WebfleetCancelledError(
                f"Retrieval cancelled with {remaining} call(s) left",
                calls_issued=calls_issued,
            )
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise WebfleetCancelledError(
                f"Retrieval deadline passed with {remaining} call(s) left",
                calls_issued=calls_issued,
            )


async def execute_plan(
    transport: Transport,
    plan: RetrievalPlan,
    normalizer: Callable[[Any], NormalizedBatch[T]],
    sort_key: Callable[[T], datetime],
    *,
    request_interval: float = 0.0,
    timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
) -> AggregateOutcome[T] | UpstreamErrorSignal:
    """Run *plan* call by call and merge the normalized records.

    Parameters
    ----------
    transport : Transport
        Transport used for every call.
    plan : RetrievalPlan
        Calls to issue, strictly in order and never concurrently.
    normalizer : callable
        Turns one raw response into a :class:`NormalizedBatch`.
    sort_key : callable
        Time key of a record; the merged list is stably sorted on it.
    request_interval : float
        Pause in seconds between consecutive calls.
    timeout : float or None
        Seconds after which no further call is started.
    cancel_event : asyncio.Event or None
        When set, no further call is started.

    Returns
    -------
    AggregateOutcome or UpstreamErrorSignal
        The merged records, or the first error signal returned by the
        upstream. No records are returned alongside a signal.

    Raises
    ------
    WebfleetCancelledError
        If the deadline passed or *cancel_event* was set before a call.
    WebfleetTransportError
        If a call failed at the HTTP level.
    """
    cancellation = _Cancellation(timeout, cancel_event)
    buffer: list[T] = []
    dropped = 0
    total = len(plan.requests)

    for index, request in enumerate(plan.requests):
        if index and request_interval > 0:
            await asyncio.sleep(request_interval)
        # Checked after pacing: no call starts past the deadline.
        cancellation.check(index, total - index)

        raw = await fetch_raw(transport, request)

        signal = extract_error_signal(raw)
        if signal is not None:
            _logger.info(
                "%s returned error %s (%s); aborting after call %d/%d",
                request.label,
                signal.error_code,
                signal.error_msg,
                index + 1,
                total,
            )
            return signal

        batch = normalizer(raw)
        dropped += batch.dropped
        buffer.extend(batch.records)
        _logger.debug(
            "%s: %d record(s), %d dropped (call %d/%d)",
            request.label,
            len(batch.records),
            batch.dropped,
            index + 1,
            total,
        )

    # Day tokens run newest first, so per-call order is not global order.
    buffer.sort(key=sort_key)
    return AggregateOutcome(records=buffer, dropped=dropped, calls=total)
