"""Upstream query construction.

WEBFLEET addresses history either by a relative day token
(``range_pattern=d0``, ``d-1`` ...) or by a user-defined window
(``range_pattern=ud``) whose bounds are sent as ISO-8601 instants or as
``dd/MM/yyyy HH:mm:ss`` strings. The builder never splits a window; a
window wider than the allowed span is answered with a 9002 error signal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from pywebfleet._constants import (
    ISO_DATE_FORMAT,
    MAX_WINDOW_SPAN,
    RANGE_TOO_WIDE_CODE,
    RANGE_TOO_WIDE_MESSAGE,
    UD_DATE_FORMAT,
)
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import WebfleetRequestError
from pywebfleet.models._base import TimeRange, UpstreamErrorSignal
from pywebfleet.units import DateEncoding

_PATTERN_RE = re.compile(r"^d(0|-[1-9][0-9]*)$")


@dataclass(frozen=True)
class UpstreamRequest:
    """One upstream call: an action plus its query parameters."""

    action: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Short description for logs (no credentials)."""
        pattern = self.params.get("range_pattern", "")
        if pattern == "ud":
            start = self.params.get("rangefrom") or self.params.get("rangefrom_string", "")
            end = self.params.get("rangeto") or self.params.get("rangeto_string", "")
            return f"{self.action}[{start} .. {end}]"
        if pattern:
            return f"{self.action}[{pattern}]"
        return self.action


def format_iso_utc(value: datetime) -> str:
    """Format as ISO-8601 UTC without milliseconds, e.g. ``2025-09-29T10:15:00Z``."""
    return _as_utc(value).strftime(ISO_DATE_FORMAT)


def format_ud_utc(value: datetime) -> str:
    """Format as a WEBFLEET ``lang=en`` date string, e.g. ``29/09/2025 10:16:00`` (UTC)."""
    return _as_utc(value).strftime(UD_DATE_FORMAT)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def build_base_params(config: WebfleetConfig, action: str) -> dict[str, str]:
    """Common parameters: action, credentials and output format flags."""
    return {"action": action, **config.base_params()}


def _require_objectno(objectno: str | None) -> str:
    if objectno is None or not str(objectno).strip():
        raise WebfleetRequestError("objectno is required")
    return str(objectno).strip()


def build_pattern_request(
    config: WebfleetConfig,
    action: str,
    objectno: str,
    pattern: str,
) -> UpstreamRequest:
    """Build a day-addressed query (``d0`` is today, ``d-N`` N days back)."""
    if not _PATTERN_RE.match(pattern):
        raise WebfleetRequestError(f"Invalid range pattern: {pattern!r}")
    params = build_base_params(config, action)
    params["objectno"] = _require_objectno(objectno)
    params["range_pattern"] = pattern
    return UpstreamRequest(action=action, params=params)


def default_encoding(config: WebfleetConfig) -> DateEncoding:
    """The globally negotiated date encoding."""
    return DateEncoding.ISO8601 if config.use_iso8601 else DateEncoding.UD_STRING


def build_window_request(
    config: WebfleetConfig,
    action: str,
    objectno: str,
    window: TimeRange,
    *,
    encoding: DateEncoding | None = None,
    max_span: timedelta = MAX_WINDOW_SPAN,
) -> UpstreamRequest | UpstreamErrorSignal:
    """Build a user-defined range query.

    Parameters
    ----------
    config : WebfleetConfig
        Client configuration.
    action : str
        WEBFLEET action, e.g. ``showTracks``.
    objectno : str
        Vehicle identifier.
    window : TimeRange
        Range to query; must not exceed *max_span*.
    encoding : DateEncoding or None
        Date encoding to emit. ``None`` uses the negotiated one.
    max_span : timedelta
        Widest window the action accepts.

    Returns
    -------
    UpstreamRequest or UpstreamErrorSignal
        The request, or a 9002 signal when the window is too wide.
    """
    vehicle = _require_objectno(objectno)
    if window.span > max_span:
        return UpstreamErrorSignal(error_code=RANGE_TOO_WIDE_CODE, error_msg=RANGE_TOO_WIDE_MESSAGE)

    params = build_base_params(config, action)
    params["objectno"] = vehicle
    params["range_pattern"] = "ud"
    chosen = encoding if encoding is not None else default_encoding(config)
    if chosen is DateEncoding.UD_STRING:
        # The string form is only defined for English date formatting.
        params["lang"] = "en"
        params["rangefrom_string"] = format_ud_utc(window.start)
        params["rangeto_string"] = format_ud_utc(window.end)
    else:
        params["rangefrom"] = format_iso_utc(window.start)
        params["rangeto"] = format_iso_utc(window.end)
    return UpstreamRequest(action=action, params=params)
