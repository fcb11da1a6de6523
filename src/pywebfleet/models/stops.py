"""Stop episode models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, model_validator

from pywebfleet.models._base import WebfleetBaseModel
from pywebfleet.models.results import RetrievalResult


class StopEpisode(WebfleetBaseModel):
    """One normalized stop.

    Parameters
    ----------
    start : datetime
        Stop begin (UTC).
    end : datetime
        Stop end (UTC), never before ``start``.
    duration_minutes : int
        Stop duration in whole minutes, never negative.
    latitude : float
        Latitude in decimal degrees.
    longitude : float
        Longitude in decimal degrees.
    address : str or None
        Location text of the stop.
    """

    start: datetime
    end: datetime
    duration_minutes: int = Field(ge=0)
    latitude: float
    longitude: float
    address: str | None = None

    @model_validator(mode="after")
    def _check_order(self) -> StopEpisode:
        if self.start > self.end:
            raise ValueError("stop end precedes its start")
        return self


class StopsResult(RetrievalResult):
    """Stops of one vehicle over the resolved range."""

    records: list[StopEpisode] = Field(default_factory=list)
