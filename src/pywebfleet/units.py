"""Encoding and unit enums describing how a WEBFLEET tenant shapes its data.

The unit of a coordinate or a duration is a per-tenant fact. When it is
known, configure it explicitly; ``AUTO`` falls back to magnitude
heuristics which are ambiguous near their thresholds.
"""

from __future__ import annotations

import enum


class WebfleetEnum(str, enum.Enum):
    """Base for string-valued configuration enums.

    Every subclass **must** define ``AUTO = "auto"``. Lookups accept any
    case/whitespace variant of a member value; unknown values resolve to
    ``AUTO`` instead of raising ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> WebfleetEnum:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        auto: WebfleetEnum = cls.AUTO  # type: ignore[attr-defined]
        return auto


class CoordinateEncoding(WebfleetEnum):
    """How a tenant encodes the generic ``latitude``/``longitude`` fields.

    ``*_mdeg`` fields are always microdegrees regardless of this setting.
    """

    AUTO = "auto"
    """Magnitude heuristic: values beyond +/-180 are microdegrees."""
    DECIMAL = "decimal"
    MICRODEGREE = "microdegree"


class DurationUnit(WebfleetEnum):
    """Unit of the explicit stop ``duration`` field."""

    AUTO = "auto"
    """Magnitude heuristic: values above 10 000 are seconds."""
    SECONDS = "seconds"
    MINUTES = "minutes"


class DateEncoding(enum.Enum):
    """Date-time encodings accepted by user-defined (``ud``) range queries."""

    ISO8601 = "iso8601"
    """``YYYY-MM-DDTHH:MM:SSZ`` in ``rangefrom``/``rangeto``."""
    UD_STRING = "ud_string"
    """``dd/MM/yyyy HH:mm:ss`` UTC in ``rangefrom_string``/``rangeto_string``."""
