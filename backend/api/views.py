"""REST API views for hardiness zone lookups."""
from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any, Dict

from django.conf import settings
from django.core.cache import caches
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from hardiness.entities import Coordinate
from hardiness.presentation import render_resolution, render_viewport
from hardiness.providers.base import RequestConfig
from hardiness.providers.nominatim import NominatimReverseGeocoder
from hardiness.providers.zone_lookup import ZoneLookupClient
from hardiness.services.resolution import ZoneResolutionService
from hardiness.services.session import ResolutionSessionState


def _request_config() -> RequestConfig:
    return RequestConfig(timeout=settings.HTTP_TIMEOUT, user_agent=settings.GEOCODER_USER_AGENT)


@lru_cache(maxsize=1)
def get_geocoder() -> NominatimReverseGeocoder:
    return NominatimReverseGeocoder(
        base_url=settings.GEOCODER_URL,
        cache=caches[settings.GEOCODER_CACHE_ALIAS],
        cache_ttl=settings.GEOCODER_CACHE_TIMEOUT,
        request_config=_request_config(),
    )


@lru_cache(maxsize=1)
def get_lookup_client() -> ZoneLookupClient:
    return ZoneLookupClient(base_url=settings.ZONE_SERVICE_URL, request_config=_request_config())


def build_session() -> ResolutionSessionState:
    service = ZoneResolutionService(geocoder=get_geocoder(), lookup_client=get_lookup_client())
    return ResolutionSessionState(service, viewport_delta=settings.VIEWPORT_DELTA)


def parse_coordinate(latitude: Any, longitude: Any) -> Coordinate:
    """Raises ``ValueError`` for anything that is not a valid map point."""
    return Coordinate(latitude=float(latitude), longitude=float(longitude))


def resolve_coordinate(coordinate: Coordinate) -> Dict[str, Any]:
    """Run one resolution in a fresh session and return the rendered state."""
    session = build_session()
    resolution = asyncio.run(session.request_resolution(coordinate))
    return {
        "resolution": render_resolution(resolution),
        "viewport": render_viewport(session.viewport),
    }


class ZoneView(APIView):
    """Resolve the hardiness zone for a long-pressed map point."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the rendered resolution and viewport for ``lat``/``lon``."""
        try:
            coordinate = parse_coordinate(request.query_params["lat"], request.query_params["lon"])
        except KeyError:
            return Response({"detail": "lat and lon query parameters are required"}, status=status.HTTP_400_BAD_REQUEST)
        except ValueError as exc:
            return Response({"detail": f"invalid coordinate: {exc}"}, status=status.HTTP_400_BAD_REQUEST)

        return Response(resolve_coordinate(coordinate), status=status.HTTP_200_OK)


class HealthView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        return Response(
            {"status": "ok", "geocoder_cache": settings.GEOCODER_CACHE_ALIAS},
            status=status.HTTP_200_OK,
        )
