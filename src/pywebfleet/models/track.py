"""Historical position models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from pywebfleet.models._base import WebfleetBaseModel
from pywebfleet.models.results import RetrievalResult


class PositionPoint(WebfleetBaseModel):
    """One normalized track position.

    Parameters
    ----------
    timestamp : datetime
        Position time (UTC).
    latitude : float
        Latitude in decimal degrees.
    longitude : float
        Longitude in decimal degrees.
    speed : float or None
        Speed in km/h.
    course : float or None
        Heading in degrees.
    ignition_state : int or None
        ``1`` when ignition was on, ``0`` when off.
    standstill : int or None
        ``1`` when the vehicle was standing still.
    location_text : str or None
        Human-readable location (``postext``).
    location_text_short : str or None
        Short location text (``postext_short``).
    """

    timestamp: datetime
    latitude: float
    longitude: float
    speed: float | None = None
    course: float | None = None
    ignition_state: int | None = None
    standstill: int | None = None
    location_text: str | None = None
    location_text_short: str | None = None


class TrackResult(RetrievalResult):
    """Positions of one vehicle over the resolved range."""

    records: list[PositionPoint] = Field(default_factory=list)
