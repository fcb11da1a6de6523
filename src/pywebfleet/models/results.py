"""Aggregated retrieval result base model."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pywebfleet._constants import ISO_DATE_FORMAT


class RetrievalResult(BaseModel):
    """Common envelope of a successful track or stop retrieval.

    ``range_from``/``range_to`` serialize as ``from``/``to``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identifier: str
    range_from: datetime = Field(alias="from")
    range_to: datetime = Field(alias="to")
    dropped_records: int = 0
    calls: int = 0

    def to_wire(self) -> dict[str, Any]:
        """Return a JSON-ready dict with ISO-8601 UTC ``from``/``to``."""
        data = self.model_dump(mode="json", by_alias=True, exclude={"records": {"__all__": {"raw"}}})
        data["from"] = self.range_from.astimezone(UTC).strftime(ISO_DATE_FORMAT)
        data["to"] = self.range_to.astimezone(UTC).strftime(ISO_DATE_FORMAT)
        return data
