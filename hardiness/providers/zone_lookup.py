from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import quote

from pydantic import ValidationError

from .base import HttpProvider, LookupParseError, LookupTransportError
from ..entities import ErrorKind, ZoneRecord, ZoneRecordOutcome
from ..schemas import ZoneServicePayload


class ZoneLookupClient(HttpProvider):
    """Client for the static hardiness zone service (``<base>/<postal code>.json``).

    Every call hits the network once. Failures come back as a failed
    :class:`ZoneRecordOutcome`, never as an exception.
    """

    base_url = "https://phzmapi.org"
    transport_error = LookupTransportError
    parse_error = LookupParseError

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or self.base_url).rstrip("/")

    async def lookup(self, postal_code: str) -> ZoneRecordOutcome:
        code = (postal_code or "").strip()
        if not code:
            return ZoneRecordOutcome.failed(ErrorKind.LOOKUP_PARSE_ERROR, "blank postal code")
        try:
            record = await asyncio.to_thread(self.fetch, code)
        except LookupTransportError as exc:
            return ZoneRecordOutcome.failed(ErrorKind.LOOKUP_TRANSPORT_ERROR, str(exc))
        except LookupParseError as exc:
            return ZoneRecordOutcome.failed(ErrorKind.LOOKUP_PARSE_ERROR, str(exc))
        return ZoneRecordOutcome.success(record)

    def fetch(self, postal_code: str) -> ZoneRecord:
        """Blocking fetch; raises the provider errors that ``lookup`` converts."""
        response = self._request("GET", self.url_for(postal_code))
        data = self._json(response)
        if not isinstance(data, dict):
            raise LookupParseError("expected a JSON object")
        try:
            payload = ZoneServicePayload.model_validate(data)
        except ValidationError as exc:
            self._log.error("Unexpected zone payload for %s: %s", postal_code, exc)
            raise LookupParseError("invalid zone payload") from exc
        return payload.to_record()

    def url_for(self, postal_code: str) -> str:
        return f"{self.base_url}/{quote(postal_code, safe='')}.json"


__all__ = ["ZoneLookupClient"]
