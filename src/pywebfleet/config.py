"""Client configuration for pywebfleet."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pywebfleet._constants import BASE_URL
from pywebfleet.exceptions import WebfleetConfigError
from pywebfleet.units import CoordinateEncoding, DurationUnit


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclasses.dataclass(frozen=True)
class WebfleetConfig:
    """Client configuration.

    Built once per process (or per tenant) and passed explicitly to the
    client; nothing in the library reads the environment at call time.

    Parameters
    ----------
    account : str
        WEBFLEET account name.
    username : str
        WEBFLEET user name.
    password : str
        WEBFLEET user password.
    apikey : str
        WEBFLEET.connect API key.
    base_url : str
        Remote API endpoint. Defaults to ``https://csv.webfleet.com/extern``.
    language : str
        ``lang`` query parameter. Requests that send ``dd/MM/yyyy`` date
        strings always override it with ``en``.
    use_iso8601 : bool
        Whether the upstream accepts and returns ISO-8601 dates. Selects
        the default date encoding of user-defined range queries.
    use_utf8 : bool
        ``useUTF8`` query parameter.
    use_merdeg : bool
        ``useMerdeg`` query parameter (adds ``*_mdeg`` coordinate fields).
    time_zone : str
        IANA zone in which presets such as ``today`` and ``yesterday``
        are evaluated.
    coordinate_encoding : CoordinateEncoding
        How this tenant encodes generic ``latitude``/``longitude`` fields.
    duration_unit : DurationUnit
        Unit of the stop ``duration`` field for this tenant.
    strict_presets : bool
        Reject unknown preset tokens instead of falling back to ``today``.
    transport_retries : int
        Extra attempts after a retryable transport failure.
    retry_backoff : float
        Base delay in seconds; doubles with every retry.
    request_interval : float
        Pause in seconds between consecutive calls of one aggregation.
    request_timeout : float
        Total timeout in seconds of a single HTTP request.
    """

    account: str
    username: str
    password: str
    apikey: str
    base_url: str = BASE_URL
    language: str = "en"
    use_iso8601: bool = True
    use_utf8: bool = True
    use_merdeg: bool = True
    time_zone: str = "UTC"
    coordinate_encoding: CoordinateEncoding = CoordinateEncoding.AUTO
    duration_unit: DurationUnit = DurationUnit.AUTO
    strict_presets: bool = False
    transport_retries: int = 2
    retry_backoff: float = 0.5
    request_interval: float = 0.0
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        # Normalise enum fields given as plain strings (e.g. from env vars).
        object.__setattr__(self, "coordinate_encoding", CoordinateEncoding(self.coordinate_encoding))
        object.__setattr__(self, "duration_unit", DurationUnit(self.duration_unit))
        if self.transport_retries < 0:
            raise WebfleetConfigError("transport_retries must not be negative")
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise WebfleetConfigError(f"Unknown time zone: {self.time_zone!r}") from exc

    @property
    def zone(self) -> ZoneInfo:
        """The configured local zone."""
        return ZoneInfo(self.time_zone)

    def base_params(self) -> dict[str, str]:
        """Credential and format parameters sent with every request."""
        return {
            "account": self.account,
            "apikey": self.apikey,
            "username": self.username,
            "password": self.password,
            "outputformat": "json",
            "lang": self.language,
            "useISO8601": _flag(self.use_iso8601),
            "useUTF8": _flag(self.use_utf8),
            "useMerdeg": _flag(self.use_merdeg),
        }

    @classmethod
    def from_env(cls, **overrides: Any) -> WebfleetConfig:
        """Create configuration from environment variables.

        Reads ``WEBFLEET_ACCOUNT``, ``WEBFLEET_USERNAME``,
        ``WEBFLEET_PASSWORD``, ``WEBFLEET_APIKEY``, ``API_BASE`` and the
        optional ``WEBFLEET_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        WebfleetConfig
            Populated configuration.

        Raises
        ------
        WebfleetConfigError
            If a credential is missing or a numeric variable is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "WEBFLEET_ACCOUNT": "account",
            "WEBFLEET_USERNAME": "username",
            "WEBFLEET_PASSWORD": "password",
            "WEBFLEET_APIKEY": "apikey",
            "API_BASE": "base_url",
            "WEBFLEET_LANG": "language",
            "WEBFLEET_TIME_ZONE": "time_zone",
            "WEBFLEET_COORDINATE_ENCODING": "coordinate_encoding",
            "WEBFLEET_DURATION_UNIT": "duration_unit",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        _ENV_BOOL_MAP = {
            "WEBFLEET_USE_ISO8601": ("use_iso8601", True),
            "WEBFLEET_USE_UTF8": ("use_utf8", True),
            "WEBFLEET_USE_MERDEG": ("use_merdeg", True),
            "WEBFLEET_STRICT_PRESETS": ("strict_presets", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "WEBFLEET_TRANSPORT_RETRIES": ("transport_retries", int),
            "WEBFLEET_RETRY_BACKOFF": ("retry_backoff", float),
            "WEBFLEET_REQUEST_INTERVAL": ("request_interval", float),
            "WEBFLEET_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = cast(val)
            except ValueError as exc:
                raise WebfleetConfigError(f"{env_key} is not a valid {cast.__name__}: {val!r}") from exc

        config_kwargs.update(overrides)

        missing = [name for name in ("account", "username", "password", "apikey") if not config_kwargs.get(name)]
        if missing:
            raise WebfleetConfigError(f"Missing WEBFLEET credentials: {', '.join(missing)}")

        return cls(**config_kwargs)
