"""Base models for WEBFLEET API records and time ranges.

Every record model inherits from :class:`WebfleetBaseModel` which
provides:

* ``frozen=True`` so normalized records are never mutated after
  construction.
* A ``model_validator(mode="before")`` that strips WEBFLEET sentinel
  values (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload when a model is
  validated straight from an API dict.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Sentinel strings WEBFLEET uses for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan"})


class WebfleetBaseModel(BaseModel):
    """Base for WEBFLEET record models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API record dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_webfleet_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class TimeRange(BaseModel):
    """Absolute time span with second precision.

    Bounds are stored in UTC so that arithmetic on them measures elapsed
    time, also across DST transitions of the zone they were given in.

    Parameters
    ----------
    start : datetime
        Inclusive start (timezone-aware).
    end : datetime
        End instant (timezone-aware), never before ``start``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> TimeRange:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeRange bounds must be timezone-aware")
        object.__setattr__(self, "start", self.start.astimezone(UTC).replace(microsecond=0))
        object.__setattr__(self, "end", self.end.astimezone(UTC).replace(microsecond=0))
        if self.start > self.end:
            raise ValueError(f"TimeRange start {self.start.isoformat()} is after end {self.end.isoformat()}")
        return self

    @property
    def span(self) -> timedelta:
        """Length of the range as a ``timedelta``."""
        return self.end - self.start


class UpstreamErrorSignal(BaseModel):
    """Business error reported inside a transport-successful response.

    This is a returned value, not an exception: aggregation stops at the
    first signal and hands it back verbatim.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    error_code: int | str = Field(alias="errorCode")
    error_msg: str = Field(default="", alias="errorMsg")

    def to_wire(self) -> dict[str, Any]:
        """Return the upstream ``{errorCode, errorMsg}`` shape."""
        return self.model_dump(by_alias=True)
