"""Fleet snapshot endpoint.

Action: ``showObjectReportExtern``
"""

from __future__ import annotations

import logging

from pywebfleet._api._common import extract_error_signal, fetch_raw
from pywebfleet._api._request import UpstreamRequest, build_base_params
from pywebfleet._constants import ACTION_SHOW_OBJECT_REPORT
from pywebfleet._transport import Transport
from pywebfleet.config import WebfleetConfig
from pywebfleet.ingestion.records import normalize_fleet
from pywebfleet.models._base import UpstreamErrorSignal
from pywebfleet.models.fleet import FleetSnapshot

_logger = logging.getLogger(__name__)


async def fetch_fleet_snapshot(config: WebfleetConfig, transport: Transport) -> FleetSnapshot | UpstreamErrorSignal:
    """Fetch the current state of every vehicle with decimal coordinates."""
    request = UpstreamRequest(
        action=ACTION_SHOW_OBJECT_REPORT,
        params=build_base_params(config, ACTION_SHOW_OBJECT_REPORT),
    )
    raw = await fetch_raw(transport, request)
    signal = extract_error_signal(raw)
    if signal is not None:
        return signal

    batch = normalize_fleet(raw, coordinate_encoding=config.coordinate_encoding)
    _logger.debug("Fleet snapshot: %d vehicle(s), %d dropped", len(batch.records), batch.dropped)
    return FleetSnapshot(report=batch.records, dropped_records=batch.dropped)
