from __future__ import annotations

import pytest
import requests

from src.hr_attendance.hr_attendance.core.exceptions import GeocodingUnavailable
from src.hr_attendance.hr_attendance.geocoding.http_geocoder import BIGDATACLOUD, NOMINATIM, HttpReverseGeocoder
from src.hr_attendance.hr_attendance.geocoding.provider import coordinate_label


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, timeout))
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result


def _geocoder(session):
    return HttpReverseGeocoder(endpoints=(BIGDATACLOUD, NOMINATIM), timeout_seconds=2.0, session=session)


def test_first_provider_wins():
    session = FakeSession({BIGDATACLOUD.url: FakeResponse({"locality": "Westminster"})})

    assert _geocoder(session).reverse(51.5, -0.1) == "Westminster"
    assert len(session.calls) == 1
    assert session.calls[0][2] == 2.0


def test_falls_through_to_second_provider():
    session = FakeSession(
        {
            BIGDATACLOUD.url: requests.Timeout("slow"),
            NOMINATIM.url: FakeResponse({"display_name": "10 Downing Street, London"}),
        }
    )

    assert _geocoder(session).reverse(51.5, -0.1) == "10 Downing Street, London"
    assert len(session.calls) == 2


def test_empty_and_malformed_answers_count_as_failures():
    session = FakeSession(
        {
            BIGDATACLOUD.url: FakeResponse({}),
            NOMINATIM.url: FakeResponse(ValueError("not json")),
        }
    )

    with pytest.raises(GeocodingUnavailable):
        _geocoder(session).reverse(51.5, -0.1)


def test_http_errors_raise_unavailable():
    session = FakeSession({BIGDATACLOUD.url: FakeResponse({}, status=503), NOMINATIM.url: FakeResponse({}, status=429)})

    with pytest.raises(GeocodingUnavailable):
        _geocoder(session).reverse(0.0, 0.0)


def test_coordinate_label_has_six_decimals():
    assert coordinate_label(51.5, -0.1) == "51.500000, -0.100000"
