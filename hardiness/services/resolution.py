from __future__ import annotations

import itertools
import logging
from typing import Callable, Optional

from ..abstractions import ReverseGeocoder, ZoneLookup
from ..entities import (
    Coordinate,
    ErrorKind,
    Failed,
    NotFound,
    Success,
    ZoneResolution,
)


Publisher = Callable[[ZoneResolution], None]


class ZoneResolutionService:
    """Resolve a map coordinate to a hardiness zone.

    Only the most recently started request may publish its outcome. Earlier
    requests that finish later still return their resolution to the caller,
    but ``publish`` is not called for them.
    """

    def __init__(
        self,
        *,
        geocoder: ReverseGeocoder,
        lookup_client: ZoneLookup,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.geocoder = geocoder
        self.lookup_client = lookup_client
        self._tickets = itertools.count(1)
        self._latest_ticket = 0
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @property
    def latest_ticket(self) -> int:
        return self._latest_ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest_ticket

    # Public API ---------------------------------------------------------
    async def resolve(self, coordinate: Coordinate, publish: Optional[Publisher] = None) -> ZoneResolution:
        ticket = next(self._tickets)
        self._latest_ticket = ticket
        resolution = await self._resolve(coordinate)
        # no await between the check and the publish
        if self.is_current(ticket):
            if publish is not None:
                publish(resolution)
        else:
            self._log.debug(
                "Dropping superseded resolution #%s for %s (latest is #%s)",
                ticket,
                coordinate,
                self._latest_ticket,
            )
        return resolution

    # Helpers ------------------------------------------------------------
    async def _resolve(self, coordinate: Coordinate) -> ZoneResolution:
        try:
            candidates = await self.geocoder.geocode(coordinate)
        except Exception as exc:  # noqa: BLE001 - any geocoder failure becomes data
            self._log.warning("Reverse geocoding failed for %s: %s", coordinate, exc)
            return Failed(coordinate, ErrorKind.GEOCODE_ERROR, str(exc))

        postal_code = self._postal_code(candidates)
        if postal_code is None:
            self._log.info("No postal code for %s", coordinate)
            return NotFound(coordinate)

        try:
            outcome = await self.lookup_client.lookup(postal_code)
        except Exception as exc:  # noqa: BLE001 - a misbehaving lookup still resolves
            self._log.error("Zone lookup for %s raised: %s", postal_code, exc)
            return Failed(coordinate, ErrorKind.LOOKUP_TRANSPORT_ERROR, str(exc))
        if not outcome.ok or outcome.record is None:
            self._log.error("Zone lookup for %s failed: %s %s", postal_code, outcome.error, outcome.detail)
            return Failed(coordinate, outcome.error or ErrorKind.LOOKUP_PARSE_ERROR, outcome.detail)
        return Success(coordinate, outcome.record)

    @staticmethod
    def _postal_code(candidates) -> Optional[str]:
        if not candidates:
            return None
        code = candidates[0].postal_code
        if code is None or not code.strip():
            return None
        return code.strip()


__all__ = ["ZoneResolutionService", "Publisher"]
