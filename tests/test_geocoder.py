from __future__ import annotations

import httpx
import pytest

from address_records import (
    AddressConfig,
    AddressRecord,
    Country,
    GeocodeStatus,
    GoogleGeocoder,
    set_config,
)
from address_records.geocoding import client as geocoding_client

LONDON = {"lat": 51.5237715, "lng": -0.1585328}


def _geocoder(handler, **kwargs) -> GoogleGeocoder:
    return GoogleGeocoder(transport=httpx.MockTransport(handler), **kwargs)


def _springfield() -> AddressRecord:
    record = AddressRecord(line_1="1 Main St", city="Springfield")
    record.country = Country(name="USA")
    return record


def test_lookup_sends_raw_query_and_sensor_flag() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"results": [{"geometry": {"location": LONDON}}]})

    result = _geocoder(handler).lookup("1+Main+St,Springfield,USA")

    assert seen == [
        "https://maps.google.com/maps/api/geocode/json"
        "?address=1+Main+St,Springfield,USA&sensor=false"
    ]
    assert result.status is GeocodeStatus.OK
    assert result.is_found
    assert (result.lat, result.lng) == (LONDON["lat"], LONDON["lng"])


def test_redirect_is_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "maps.google.com":
            target = str(request.url).replace("maps.google.com", "maps.googleapis.com")
            return httpx.Response(301, headers={"Location": target})
        return httpx.Response(200, json={"results": [{"geometry": {"location": LONDON}}]})

    record = _springfield()
    result = _geocoder(handler).geocode_record(record)

    assert result.status is GeocodeStatus.OK
    assert (record.lat, record.lng) == (LONDON["lat"], LONDON["lng"])


def test_first_result_wins() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "results": [
                    {"geometry": {"location": {"lat": 1.5, "lng": 2.5}}},
                    {"geometry": {"location": {"lat": 9.0, "lng": 9.0}}},
                ]
            },
        )

    result = _geocoder(handler).lookup("somewhere")
    assert (result.lat, result.lng) == (1.5, 2.5)


def test_api_key_and_base_url_come_from_config() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"results": []})

    config = AddressConfig(geocode_url="https://geo.test/json", geocode_api_key="secret")
    _geocoder(handler, config=config).lookup("Cork")

    assert seen == ["https://geo.test/json?address=Cork&sensor=false&key=secret"]


def test_geocode_record_sets_coordinates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["address"] == "1 Main St,Springfield,USA"
        return httpx.Response(200, json={"results": [{"geometry": {"location": LONDON}}]})

    record = _springfield()
    returned = record.geocode(_geocoder(handler))

    assert returned is record
    assert record.lat == LONDON["lat"]
    assert record.lng == LONDON["lng"]


@pytest.mark.parametrize(
    ("response", "status"),
    [
        (httpx.Response(200, json={"results": [], "status": "ZERO_RESULTS"}), GeocodeStatus.NO_RESULTS),
        (httpx.Response(200, json={"status": "REQUEST_DENIED"}), GeocodeStatus.NO_RESULTS),
        (httpx.Response(200, content=b""), GeocodeStatus.INVALID_RESPONSE),
        (httpx.Response(200, content=b"<html>"), GeocodeStatus.INVALID_RESPONSE),
        (httpx.Response(200, json=["not", "an", "object"]), GeocodeStatus.INVALID_RESPONSE),
        (httpx.Response(200, json={"results": [{"geometry": {}}]}), GeocodeStatus.INVALID_RESPONSE),
        (httpx.Response(500, text="boom"), GeocodeStatus.HTTP_ERROR),
    ],
)
def test_failures_leave_coordinates_untouched(response: httpx.Response, status: GeocodeStatus) -> None:
    record = _springfield()
    record.lat, record.lng = 10.0, 20.0

    result = _geocoder(lambda request: response).geocode_record(record)

    assert result.status is status
    assert not result.is_found
    assert (record.lat, record.lng) == (10.0, 20.0)


def test_network_failure_is_absorbed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    record = _springfield()
    record.geocode(_geocoder(handler))

    assert record.lat is None
    assert record.lng is None


def test_network_failure_reports_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = _geocoder(handler).lookup("Cork")

    assert result.status is GeocodeStatus.REQUEST_FAILED
    assert "timed out" in (result.error or "")


def test_empty_address_makes_no_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    record = AddressRecord()
    result = _geocoder(handler).geocode_record(record)

    assert result.status is GeocodeStatus.EMPTY_QUERY
    assert record.lat is None


def test_record_geocode_uses_shared_geocoder(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [{"geometry": {"location": LONDON}}]})

    set_config(AddressConfig(geocode_url="https://geo.test/json"))
    monkeypatch.setattr(geocoding_client, "_default_geocoder", _geocoder(handler))

    record = _springfield().geocode()

    assert record.lat == LONDON["lat"]


def test_geocoder_context_manager_closes_client() -> None:
    with _geocoder(lambda request: httpx.Response(200, json={})) as geocoder:
        assert geocoder.lookup("x").status is GeocodeStatus.NO_RESULTS
    assert geocoder._client.is_closed
