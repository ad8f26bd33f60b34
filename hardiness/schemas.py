"""Validation schema for the zone service response body."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from hardiness.entities import Coordinate, ZoneRecord

__all__ = ["ReferencePoint", "ZoneServicePayload"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ReferencePoint(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lat: Optional[float] = None
    lon: Optional[float] = None

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def lenient_float(cls, value: Any) -> Optional[float]:
        value = _blank_to_none(value)
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def to_coordinate(self) -> Optional[Coordinate]:
        if self.lat is None or self.lon is None:
            return None
        try:
            return Coordinate(latitude=self.lat, longitude=self.lon)
        except ValueError:
            return None


class ZoneServicePayload(BaseModel):
    """``GET /<postal code>.json`` body. Every field is optional.

    ``coordinates`` is informational, so an unreadable value drops the
    reference point instead of the whole record.
    """

    model_config = ConfigDict(extra="ignore")

    zone: Optional[str] = None
    temperature_range: Optional[str] = None
    coordinates: Optional[ReferencePoint] = None

    @field_validator("zone", "temperature_range", mode="before")
    @classmethod
    def blank_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("coordinates", mode="before")
    @classmethod
    def mapping_only(cls, value: Any) -> Any:
        if isinstance(value, (dict, ReferencePoint)):
            return value
        return None

    def to_record(self) -> ZoneRecord:
        reference = self.coordinates.to_coordinate() if self.coordinates else None
        return ZoneRecord(
            zone=self.zone.strip() if self.zone else None,
            temperature_range=self.temperature_range.strip() if self.temperature_range else None,
            reference=reference,
        )
