"""HTTP transport for the WEBFLEET Remote API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pywebfleet._constants import RETRYABLE_STATUS_CODES, USER_AGENT
from pywebfleet._redact import redact_query
from pywebfleet.config import WebfleetConfig
from pywebfleet.exceptions import WebfleetTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, params: Mapping[str, str]) -> Any:
        ...


class HttpTransport:
    """GET-based transport with bounded retry for transport failures.

    Only network failures and 429/5xx statuses are retried. Business
    errors travel inside successful responses and are returned as-is.
    """

    def __init__(self, config: WebfleetConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def get_json(self, params: Mapping[str, str]) -> Any:
        """GET the endpoint with *params* and return the decoded JSON body."""
        attempts = self._config.transport_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._get_once(params)
            except WebfleetTransportError as exc:
                if not exc.retryable or attempt >= attempts:
                    raise
                delay = self._config.retry_backoff * (2 ** (attempt - 1))
                _logger.info(
                    "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                    exc.action or "request",
                    attempt,
                    attempts,
                    exc,
                    delay,
                )
                if delay > 0:
                    await asyncio.sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _get_once(self, params: Mapping[str, str]) -> Any:
        action = params.get("action", "")
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("GET %s?%s", self._config.base_url, redact_query(params))

        try:
            async with self._http.get(
                self._config.base_url,
                params=dict(params),
                headers=headers,
                timeout=timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise WebfleetTransportError(
                        f"HTTP {resp.status} from {action}: {text[:200]}",
                        status_code=resp.status,
                        action=action,
                        retryable=resp.status in RETRYABLE_STATUS_CODES,
                    )
        except WebfleetTransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise WebfleetTransportError(
                f"Request to {action} failed: {exc!r}",
                action=action,
                retryable=True,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise WebfleetTransportError(
                f"Invalid JSON from {action}: {text[:200]}",
                action=action,
            ) from exc
