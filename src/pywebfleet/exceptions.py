"""Custom exception hierarchy for pywebfleet."""

from __future__ import annotations


class WebfleetError(Exception):
    """Base exception for all pywebfleet errors."""


class WebfleetConfigError(WebfleetError):
    """Invalid or missing configuration."""


class WebfleetRequestError(WebfleetError):
    """Caller input rejected before any upstream call was made.

    Covers a missing vehicle identifier, a reversed time range, a malformed
    day pattern token and (in strict mode) an unknown preset.
    """


class WebfleetTransportError(WebfleetError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        action: str = "",
        retryable: bool = False,
    ) -> None:
        self.status_code = status_code
        self.action = action
        self.retryable = retryable
        super().__init__(message)


class WebfleetCancelledError(WebfleetError):
    """Aggregation aborted by a caller deadline or cancel signal.

    Raised before the next planned upstream call; the calls that were not
    issued yet are never issued.
    """

    def __init__(self, message: str, *, calls_issued: int = 0) -> None:
        self.calls_issued = calls_issued
        super().__init__(message)
