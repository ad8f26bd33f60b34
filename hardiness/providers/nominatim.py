"""Reverse geocoding through the OpenStreetMap Nominatim API.

Nominatim's usage policy asks clients to identify themselves and to avoid
repeating identical queries, so every adapter sends a ``User-Agent`` and keeps
answers in a cache keyed by the rounded coordinate. Any backend with the
Django cache ``get``/``set`` shape works; :class:`ExpiringCache` is the default.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence, Tuple

from .base import GeocodingError, HttpProvider
from ..abstractions import CacheBackend
from ..cache import ExpiringCache
from ..entities import AddressCandidate, Coordinate


class NominatimReverseGeocoder(HttpProvider):
    base_url = "https://nominatim.openstreetmap.org"
    transport_error = GeocodingError
    parse_error = GeocodingError

    CACHE_TTL = 24 * 3600

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[CacheBackend] = None,
        cache_ttl: Optional[float] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or self.base_url).rstrip("/")
        self.cache = cache if cache is not None else ExpiringCache()
        self.cache_ttl = self.CACHE_TTL if cache_ttl is None else cache_ttl

    async def geocode(self, coordinate: Coordinate) -> Sequence[AddressCandidate]:
        return await asyncio.to_thread(self.reverse, coordinate)

    def reverse(self, coordinate: Coordinate) -> Tuple[AddressCandidate, ...]:
        key = self._cache_key(coordinate)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "format": "jsonv2",
            "addressdetails": 1,
        }
        response = self._request("GET", f"{self.base_url}/reverse", params=params)
        data = self._json(response)
        if not isinstance(data, dict):
            raise GeocodingError("expected a JSON object")
        candidates = self._candidates(data)
        self.cache.set(key, candidates, self.cache_ttl)
        return candidates

    # helpers ------------------------------------------------------------
    def _candidates(self, data: dict) -> Tuple[AddressCandidate, ...]:
        if data.get("error"):
            # Nominatim answers 200 with an error message for unaddressable points
            self._log.debug("No address for point: %s", data["error"])
            return ()
        address = data.get("address") or {}
        if not isinstance(address, dict):
            raise GeocodingError("unexpected address payload")
        return (
            AddressCandidate(
                postal_code=_first_postcode(address.get("postcode")),
                label=data.get("display_name") or None,
            ),
        )

    def _cache_key(self, coordinate: Coordinate) -> str:
        return f"reverse:{coordinate.latitude:.5f}:{coordinate.longitude:.5f}"


def _first_postcode(value: Optional[object]) -> Optional[str]:
    if value is None:
        return None
    # multi-valued postcodes come back separated by semicolons
    first = str(value).split(";")[0].strip()
    return first or None


__all__ = ["NominatimReverseGeocoder"]
