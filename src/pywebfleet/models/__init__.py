"""Data models for WEBFLEET API records."""

from pywebfleet.models._base import TimeRange, UpstreamErrorSignal, WebfleetBaseModel
from pywebfleet.models.fleet import FleetSnapshot, VehicleSnapshot
from pywebfleet.models.results import RetrievalResult
from pywebfleet.models.stops import StopEpisode, StopsResult
from pywebfleet.models.track import PositionPoint, TrackResult

__all__ = [
    "FleetSnapshot",
    "PositionPoint",
    "RetrievalResult",
    "StopEpisode",
    "StopsResult",
    "TimeRange",
    "TrackResult",
    "UpstreamErrorSignal",
    "VehicleSnapshot",
    "WebfleetBaseModel",
]
