"""High-level async client for the WEBFLEET Remote API."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

import aiohttp

from pywebfleet._api import fleet as _fleet_api
from pywebfleet._api import stops as _stops_api
from pywebfleet._api import tracks as _tracks_api
from pywebfleet._transport import HttpTransport, Transport
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import WebfleetError
from pywebfleet.models._base import UpstreamErrorSignal
from pywebfleet.models.fleet import FleetSnapshot
from pywebfleet.models.stops import StopsResult
from pywebfleet.models.track import TrackResult
from pywebfleet.ranges import InstantLike

_logger = logging.getLogger(__name__)


class WebfleetClient:
    """Async client for the WEBFLEET Remote API.

    Usage::

        async with WebfleetClient(WebfleetConfig.from_env()) as client:
            track = await client.get_vehicle_track("042", preset="yesterday")

    Each retrieval issues its upstream calls sequentially. Separate
    retrievals share nothing but the configuration and the HTTP session
    and may run concurrently.
    """

    def __init__(
        self,
        config: WebfleetConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> WebfleetClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    @property
    def config(self) -> WebfleetConfig:
        return self._config

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise WebfleetError("Client not initialized. Use 'async with WebfleetClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def get_vehicle_track(
        self,
        objectno: str,
        *,
        range_from: InstantLike | None = None,
        range_to: InstantLike | None = None,
        preset: str | None = None,
        now: datetime | None = None,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> TrackResult | UpstreamErrorSignal:
        """Fetch the positions of a vehicle.

        A custom range may span at most 48 hours; a wider one returns an
        :class:`UpstreamErrorSignal` with code 9002 and no call is made.
        """
        transport = self._require_transport()
        return await _tracks_api.fetch_track(
            self._config,
            transport,
            objectno,
            range_from=range_from,
            range_to=range_to,
            preset=preset,
            now=now,
            timeout=timeout,
            cancel_event=cancel_event,
        )

    async def get_vehicle_stops(
        self,
        objectno: str,
        *,
        range_from: InstantLike | None = None,
        range_to: InstantLike | None = None,
        preset: str | None = None,
        now: datetime | None = None,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> StopsResult | UpstreamErrorSignal:
        """Fetch the stops of a vehicle; long ranges are split into 48 h windows."""
        transport = self._require_transport()
        return await _stops_api.fetch_stops(
            self._config,
            transport,
            objectno,
            range_from=range_from,
            range_to=range_to,
            preset=preset,
            now=now,
            timeout=timeout,
            cancel_event=cancel_event,
        )

    async def get_fleet_snapshot(self) -> FleetSnapshot | UpstreamErrorSignal:
        """Fetch the current position and state of every vehicle."""
        transport = self._require_transport()
        return await _fleet_api.fetch_fleet_snapshot(self._config, transport)
