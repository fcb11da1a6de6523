"""Shared helpers for WEBFLEET endpoint modules.

This module centralizes the patterns every endpoint repeats:
- detecting a business error embedded in a successful response
- issuing one request through the transport

It is internal to pywebfleet and may change at any time.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pywebfleet._api._request import UpstreamRequest
from pywebfleet._transport import Transport
from pywebfleet.models._base import UpstreamErrorSignal

_logger = logging.getLogger(__name__)


def extract_error_signal(raw: Any) -> UpstreamErrorSignal | None:
    """Return the error signal carried by *raw*, if any.

    WEBFLEET reports failures as ``{"errorCode": ..., "errorMsg": ...}``
    with HTTP 200. Some older responses use a bare ``error`` key. A zero
    or empty code is not an error.
    """
    if not isinstance(raw, Mapping):
        return None
    code = raw.get("errorCode") or raw.get("error")
    if not code:
        return None
    if not isinstance(code, (int, str)):
        code = str(code)
    message = raw.get("errorMsg") or raw.get("message") or ""
    return UpstreamErrorSignal(error_code=code, error_msg=str(message))


async def fetch_raw(transport: Transport, request: UpstreamRequest) -> Any:
    """Issue *request* and return the decoded response body."""
    _logger.debug("Calling %s", request.label)
    return await transport.get_json({"action": request.action, **request.params})
