"""Turn a :class:`ZoneResolution` into the payload a map screen renders."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from hardiness.entities import Failed, NotFound, Region, Success, ZoneResolution

NOT_FOUND_MESSAGE = "No hardiness zone found for this location."
FAILURE_MESSAGE = "Failed to fetch hardiness zone information."


def render_resolution(resolution: ZoneResolution) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "kind": resolution.kind,
        "latitude": resolution.coordinate.latitude,
        "longitude": resolution.coordinate.longitude,
    }
    if isinstance(resolution, Success):
        record = resolution.record
        payload["zone"] = record.zone
        payload["temperature_range"] = record.temperature_range
        payload["temperature_range_label"] = (
            f"{record.temperature_range} F" if record.temperature_range else None
        )
    elif isinstance(resolution, NotFound):
        payload["message"] = NOT_FOUND_MESSAGE
    elif isinstance(resolution, Failed):
        payload["error"] = resolution.error.value
        payload["message"] = FAILURE_MESSAGE
    return payload


def render_viewport(region: Optional[Region]) -> Optional[Dict[str, float]]:
    if region is None:
        return None
    return asdict(region)


__all__ = ["render_resolution", "render_viewport", "NOT_FOUND_MESSAGE", "FAILURE_MESSAGE"]
