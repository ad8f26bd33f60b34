from __future__ import annotations

import pytest
import requests

from hardiness.cache import ExpiringCache
from hardiness.entities import AddressCandidate, Coordinate, ErrorKind
from hardiness.providers.base import GeocodingError
from hardiness.providers.nominatim import NominatimReverseGeocoder
from hardiness.providers.zone_lookup import ZoneLookupClient


ZONE_URL = "https://zones.test/22401.json"
REVERSE_URL = "https://geocoder.test/reverse"


class TimeController:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.mark.anyio
async def test_lookup_reads_zone_and_range(requests_mock):
    client = ZoneLookupClient(base_url="https://zones.test/")
    requests_mock.get(
        ZONE_URL,
        json={
            "zone": "7a",
            "coordinates": {"lat": "38.3", "lon": "-77.49"},
            "temperature_range": "0 to 5",
        },
    )

    outcome = await client.lookup("22401")

    assert outcome.ok
    assert outcome.record.zone == "7a"
    assert outcome.record.temperature_range == "0 to 5"
    assert outcome.record.reference == Coordinate(latitude=38.3, longitude=-77.49)
    assert requests_mock.call_count == 1


@pytest.mark.anyio
async def test_lookup_surfaces_missing_fields_as_absent(requests_mock):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(ZONE_URL, json={"zone": "6b", "temperature_range": None})

    outcome = await client.lookup("22401")

    assert outcome.ok
    assert outcome.record.zone == "6b"
    assert outcome.record.temperature_range is None
    assert outcome.record.reference is None


@pytest.mark.anyio
async def test_lookup_treats_blank_fields_as_absent(requests_mock):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(ZONE_URL, json={"zone": "", "temperature_range": "  ", "coordinates": {"lat": "", "lon": ""}})

    outcome = await client.lookup("22401")

    assert outcome.ok
    assert outcome.record.zone is None
    assert outcome.record.temperature_range is None
    assert outcome.record.reference is None


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [403, 404, 500, 503])
async def test_lookup_maps_error_status_to_transport_error(requests_mock, status_code):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(ZONE_URL, status_code=status_code, text="nope")

    outcome = await client.lookup("22401")

    assert not outcome.ok
    assert outcome.record is None
    assert outcome.error is ErrorKind.LOOKUP_TRANSPORT_ERROR
    assert outcome.detail == f"HTTP {status_code}"


@pytest.mark.anyio
@pytest.mark.parametrize("exc", [requests.exceptions.ConnectionError, requests.exceptions.ConnectTimeout])
async def test_lookup_maps_network_failure_to_transport_error(requests_mock, exc):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(ZONE_URL, exc=exc)

    outcome = await client.lookup("22401")

    assert outcome.error is ErrorKind.LOOKUP_TRANSPORT_ERROR


@pytest.mark.anyio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"text": "<html>not json</html>"},
        {"json": ["7a", "0 to 5"]},
        {"json": {"zone": 7, "temperature_range": "0 to 5"}},
    ],
)
async def test_lookup_maps_unreadable_body_to_parse_error(requests_mock, kwargs):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(ZONE_URL, **kwargs)

    outcome = await client.lookup("22401")

    assert outcome.error is ErrorKind.LOOKUP_PARSE_ERROR


@pytest.mark.anyio
async def test_lookup_blank_postal_code_is_failed_outcome(requests_mock):
    client = ZoneLookupClient(base_url="https://zones.test")

    outcome = await client.lookup("  ")

    assert outcome.error is ErrorKind.LOOKUP_PARSE_ERROR
    assert outcome.record is None
    assert requests_mock.call_count == 0


@pytest.mark.anyio
async def test_lookup_deeply_nested_body_is_parse_error(requests_mock):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(ZONE_URL, text="[" * 200000 + "]" * 200000)

    outcome = await client.lookup("22401")

    assert outcome.error is ErrorKind.LOOKUP_PARSE_ERROR


@pytest.mark.anyio
@pytest.mark.parametrize(
    "coordinates",
    [
        "",
        "38.3,-77.49",
        ["38.3", "-77.49"],
        {"lat": "N/A", "lon": "-77.49"},
        {"lat": "38.3", "lon": {"deg": -77}},
        {"lat": "95", "lon": "-77.49"},
    ],
)
async def test_lookup_keeps_record_when_coordinates_unreadable(requests_mock, coordinates):
    client = ZoneLookupClient(base_url="https://zones.test")
    requests_mock.get(
        ZONE_URL,
        json={"zone": "7a", "temperature_range": "0 to 5", "coordinates": coordinates},
    )

    outcome = await client.lookup("22401")

    assert outcome.ok
    assert outcome.record.zone == "7a"
    assert outcome.record.temperature_range == "0 to 5"
    assert outcome.record.reference is None


def test_lookup_url_quotes_postal_code():
    client = ZoneLookupClient(base_url="https://zones.test")

    assert client.url_for("K1A 0B1") == "https://zones.test/K1A%200B1.json"


def test_reverse_geocoder_returns_postcode_candidate(requests_mock, virginia_point):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(
        REVERSE_URL,
        json={
            "display_name": "Fredericksburg, Virginia, 22401, United States",
            "address": {"city": "Fredericksburg", "postcode": "22401", "country_code": "us"},
        },
    )

    candidates = geocoder.reverse(virginia_point)

    assert candidates == (
        AddressCandidate(postal_code="22401", label="Fredericksburg, Virginia, 22401, United States"),
    )
    assert requests_mock.last_request.headers["User-Agent"] == "hardiness-zone-finder"


def test_reverse_geocoder_takes_first_of_multiple_postcodes(requests_mock, virginia_point):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(REVERSE_URL, json={"address": {"postcode": "22401;22405"}})

    candidates = geocoder.reverse(virginia_point)

    assert candidates[0].postal_code == "22401"
    assert candidates[0].label is None


def test_reverse_geocoder_address_without_postcode(requests_mock, virginia_point):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(REVERSE_URL, json={"display_name": "Somewhere", "address": {"state": "Virginia"}})

    candidates = geocoder.reverse(virginia_point)

    assert candidates[0].postal_code is None


def test_reverse_geocoder_unaddressable_point(requests_mock, open_ocean):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(REVERSE_URL, json={"error": "Unable to geocode"})

    assert geocoder.reverse(open_ocean) == ()


def test_reverse_geocoder_raises_on_error_status(requests_mock, virginia_point):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(REVERSE_URL, status_code=503, text="busy")

    with pytest.raises(GeocodingError):
        geocoder.reverse(virginia_point)


def test_reverse_geocoder_caches_answers(requests_mock, virginia_point):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(REVERSE_URL, json={"address": {"postcode": "22401"}})

    first = geocoder.reverse(virginia_point)
    second = geocoder.reverse(Coordinate(latitude=38.000001, longitude=-78.500001))

    assert first == second
    assert requests_mock.call_count == 1


def test_reverse_geocoder_cache_expiry(requests_mock, open_ocean):
    controller = TimeController()
    geocoder = NominatimReverseGeocoder(
        base_url="https://geocoder.test",
        cache=ExpiringCache(time_func=controller),
        cache_ttl=60,
    )
    requests_mock.get(REVERSE_URL, json={"error": "Unable to geocode"})

    geocoder.reverse(open_ocean)
    geocoder.reverse(open_ocean)
    assert requests_mock.call_count == 1

    controller.advance(61)

    geocoder.reverse(open_ocean)
    assert requests_mock.call_count == 2


@pytest.mark.anyio
async def test_reverse_geocoder_async_entry_point(requests_mock, virginia_point):
    geocoder = NominatimReverseGeocoder(base_url="https://geocoder.test")
    requests_mock.get(REVERSE_URL, json={"address": {"postcode": "22401"}})

    candidates = await geocoder.geocode(virginia_point)

    assert [c.postal_code for c in candidates] == ["22401"]


def test_expiring_cache_purges_expired_entries_on_set():
    controller = TimeController()
    cache = ExpiringCache(time_func=controller)
    for index in range(1000):
        cache.set(f"reverse:{index}", (), 60)

    controller.advance(61)
    cache.set("reverse:fresh", (), 60)

    assert len(cache) == 1
    assert cache.get("reverse:fresh") == ()
    assert cache.get("reverse:0") is None


def test_expiring_cache_skips_non_positive_ttl():
    cache = ExpiringCache()

    cache.set("reverse:a", ("x",), 0)

    assert len(cache) == 0
