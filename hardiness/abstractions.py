"""Collaborator contracts for the zone resolution pipeline."""
from __future__ import annotations

from typing import Any, Protocol, Sequence

from hardiness.entities import AddressCandidate, Coordinate, ZoneRecordOutcome


class ReverseGeocoder(Protocol):
    """Turns coordinates into candidate postal addresses."""

    async def geocode(self, coordinate: Coordinate) -> Sequence[AddressCandidate]:
        """Return candidates ordered best match first, or an empty sequence."""
        ...


class ZoneLookup(Protocol):
    """Fetches the hardiness zone for a postal code."""

    async def lookup(self, postal_code: str) -> ZoneRecordOutcome:
        """Return the zone record or a failed outcome. Must not raise."""
        ...


class CacheBackend(Protocol):
    """Key/value store with per-entry expiry; Django cache backends fit as is."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, ttl: float) -> None:
        ...
