from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response


class ProviderError(RuntimeError):
    """Base provider error."""


class LookupTransportError(ProviderError):
    """Raised when the zone service cannot be reached or answers with an error status."""


class LookupParseError(ProviderError):
    """Raised when the zone service answers with a body we cannot read."""


class GeocodingError(ProviderError):
    """Raised when reverse geocoding fails."""


@dataclass
class RequestConfig:
    timeout: float = 10.0
    user_agent: str = "hardiness-zone-finder"


class HttpProvider:
    """Base class that adds timeouts and error mapping for HTTP providers."""

    transport_error = ProviderError
    parse_error = ProviderError

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or self._build_session(self.request_config)
        self._log = logging.getLogger(self.__class__.__name__)

    def _build_session(self, config: RequestConfig) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = config.user_agent
        return session

    def _handle_response(self, response: Response) -> Response:
        if not 200 <= response.status_code < 300:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise self.transport_error(f"HTTP {response.status_code}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise self.transport_error("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise self.transport_error("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except (ValueError, RecursionError) as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise self.parse_error("invalid json") from exc


__all__ = [
    "GeocodingError",
    "HttpProvider",
    "LookupParseError",
    "LookupTransportError",
    "ProviderError",
    "RequestConfig",
]
