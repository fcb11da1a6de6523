"""Helpers for safe debug logging.

Every WEBFLEET request carries the account credentials as query
parameters, so request URLs and parameter dicts must never be logged
verbatim. ``username`` and ``account`` stay visible; they identify the
tenant when reading logs and are not secrets on their own.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

_SENSITIVE_KEYS: frozenset[str] = frozenset({"password", "apikey", "authorization", "cookie"})
_MASK = "<redacted>"


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of *value* with sensitive keys masked and long strings cut."""
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, Mapping):
        return {
            str(key): _MASK if str(key).lower() in _SENSITIVE_KEYS else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value


def redact_query(params: Mapping[str, str]) -> str:
    """Render query parameters as a URL query string with secrets masked."""
    return urlencode(redact_for_log(params), safe="<>/:")
