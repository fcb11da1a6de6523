"""Fleet snapshot models (``showObjectReportExtern``)."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pywebfleet.ingestion.normalize import safe_float, safe_int, safe_str
from pywebfleet.models._base import WebfleetBaseModel


class VehicleSnapshot(WebfleetBaseModel):
    """Current state of one fleet vehicle.

    Coordinates are always decimal degrees; the normalizer resolves
    ``*_mdeg`` fields before validation.
    """

    objectno: str | None = None
    objectname: str | None = None
    objectgroupname: str | None = None
    objectclassname: str | None = None
    objecttype: str | None = None

    drivername: str | None = None
    driver_currentworkstate: int | None = None
    drivertelmobile: str | None = None

    pos_time: str | None = None
    msgtime: str | None = None

    speed: float | None = None
    course: float | None = None
    ignition: int | None = None
    standstill: int | None = None
    status: str | None = None

    postext: str | None = None
    postext_short: str | None = None

    dest_text: str | None = None
    dest_eta: str | None = None
    dest_distance: float | None = None
    dest_isorder: int | None = None
    orderno: str | None = None

    odometer: float | None = Field(default=None, validation_alias=AliasChoices("odometer_long", "odometer"))
    engine_operating_time: float | None = None
    fuellevel: float | None = Field(
        default=None,
        validation_alias=AliasChoices("fuellevel", "fuellevel_milliliters"),
    )

    quality: int | None = None
    satellite: int | None = None

    latitude: float
    longitude: float

    @field_validator(
        "speed",
        "course",
        "dest_distance",
        "odometer",
        "engine_operating_time",
        "fuellevel",
        mode="before",
    )
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator(
        "driver_currentworkstate",
        "ignition",
        "standstill",
        "dest_isorder",
        "quality",
        "satellite",
        mode="before",
    )
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator(
        "objectno",
        "objectname",
        "objectgroupname",
        "objectclassname",
        "objecttype",
        "drivername",
        "drivertelmobile",
        "pos_time",
        "msgtime",
        "status",
        "postext",
        "postext_short",
        "dest_text",
        "dest_eta",
        "orderno",
        mode="before",
    )
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)


class FleetSnapshot(BaseModel):
    """All vehicles reported by ``showObjectReportExtern``."""

    model_config = ConfigDict(frozen=True)

    report: list[VehicleSnapshot] = Field(default_factory=list)
    dropped_records: int = 0
