from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .resolution import ZoneResolutionService
from ..entities import Coordinate, Region, ZoneResolution

DEFAULT_VIEWPORT_DELTA = 0.002


@dataclass(frozen=True)
class SessionSnapshot:
    last_coordinate: Optional[Coordinate] = None
    last_resolution: Optional[ZoneResolution] = None
    viewport: Optional[Region] = None


class ResolutionSessionState:
    """What the map screen shows: the last picked point, its zone and the viewport.

    The three values live in one immutable snapshot that is swapped in a
    single assignment, so readers see either the old triple or the new one.
    """

    def __init__(self, service: ZoneResolutionService, viewport_delta: float = DEFAULT_VIEWPORT_DELTA) -> None:
        if viewport_delta <= 0:
            raise ValueError("viewport_delta must be positive")
        self._service = service
        self._viewport_delta = viewport_delta
        self._snapshot = SessionSnapshot()

    async def request_resolution(self, coordinate: Coordinate) -> ZoneResolution:
        return await self._service.resolve(coordinate, publish=self._publish)

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def last_coordinate(self) -> Optional[Coordinate]:
        return self._snapshot.last_coordinate

    @property
    def last_resolution(self) -> Optional[ZoneResolution]:
        return self._snapshot.last_resolution

    @property
    def viewport(self) -> Optional[Region]:
        return self._snapshot.viewport

    def _publish(self, resolution: ZoneResolution) -> None:
        coordinate = resolution.coordinate
        self._snapshot = SessionSnapshot(
            last_coordinate=coordinate,
            last_resolution=resolution,
            viewport=Region.around(coordinate, self._viewport_delta),
        )


__all__ = ["ResolutionSessionState", "SessionSnapshot", "DEFAULT_VIEWPORT_DELTA"]
