from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Coordinate:
    """A point picked on the map, in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError("coordinates must be finite numbers")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude {self.latitude} is out of range")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude {self.longitude} is out of range")


@dataclass(frozen=True)
class Region:
    """Map viewport centered on a coordinate."""

    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float

    @classmethod
    def around(cls, coordinate: Coordinate, delta: float) -> "Region":
        return cls(
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            latitude_delta=delta,
            longitude_delta=delta,
        )


@dataclass(frozen=True)
class AddressCandidate:
    """One reverse geocoding match. Only the postal code is used downstream."""

    postal_code: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class ZoneRecord:
    """Hardiness zone payload for a postal code.

    Every field may be absent when the zone service only knows part of the
    answer:
    - zone, e.g. ``"7a"``
    - temperature_range, the minimum winter temperature band in Fahrenheit
    - reference, the point the service associates with the postal code
    """

    zone: Optional[str]
    temperature_range: Optional[str]
    reference: Optional[Coordinate] = None


class ErrorKind(str, Enum):
    GEOCODE_ERROR = "geocode_error"
    LOOKUP_TRANSPORT_ERROR = "lookup_transport_error"
    LOOKUP_PARSE_ERROR = "lookup_parse_error"


@dataclass(frozen=True)
class ZoneRecordOutcome:
    record: Optional[ZoneRecord] = None
    error: Optional[ErrorKind] = None
    detail: str = ""

    @classmethod
    def success(cls, record: ZoneRecord) -> "ZoneRecordOutcome":
        return cls(record=record)

    @classmethod
    def failed(cls, error: ErrorKind, detail: str = "") -> "ZoneRecordOutcome":
        return cls(error=error, detail=detail)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Success:
    coordinate: Coordinate
    record: ZoneRecord
    kind = "success"


@dataclass(frozen=True)
class NotFound:
    coordinate: Coordinate
    kind = "not_found"


@dataclass(frozen=True)
class Failed:
    coordinate: Coordinate
    error: ErrorKind
    detail: str = ""
    kind = "failed"


ZoneResolution = Union[Success, NotFound, Failed]


__all__ = [
    "AddressCandidate",
    "Coordinate",
    "ErrorKind",
    "Failed",
    "NotFound",
    "Region",
    "Success",
    "ZoneRecord",
    "ZoneRecordOutcome",
    "ZoneResolution",
]
