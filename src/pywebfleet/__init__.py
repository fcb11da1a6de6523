"""pywebfleet - Async Python client for WEBFLEET vehicle history and fleet data."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pywebfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from pywebfleet.client import WebfleetClient
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import (
    WebfleetCancelledError,
    WebfleetConfigError,
    WebfleetError,
    WebfleetRequestError,
    WebfleetTransportError,
)
from pywebfleet.models import (
    FleetSnapshot,
    PositionPoint,
    StopEpisode,
    StopsResult,
    TimeRange,
    TrackResult,
    UpstreamErrorSignal,
    VehicleSnapshot,
)
from pywebfleet.ranges import Preset, resolve_range, split_range
from pywebfleet.units import CoordinateEncoding, DateEncoding, DurationUnit

__all__ = [
    "__version__",
    "CoordinateEncoding",
    "DateEncoding",
    "DurationUnit",
    "FleetSnapshot",
    "PositionPoint",
    "Preset",
    "StopEpisode",
    "StopsResult",
    "TimeRange",
    "TrackResult",
    "UpstreamErrorSignal",
    "VehicleSnapshot",
    "WebfleetCancelledError",
    "WebfleetClient",
    "WebfleetConfig",
    "WebfleetConfigError",
    "WebfleetError",
    "WebfleetRequestError",
    "WebfleetTransportError",
    "resolve_range",
    "split_range",
]
