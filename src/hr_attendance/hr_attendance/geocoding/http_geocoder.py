"""Reverse geocoding over public HTTP APIs.

Providers are tried in order with a short timeout each; the first one that
returns a non-empty address wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import requests

from ..core.constants import DEFAULT_GEOCODER_TIMEOUT_SECONDS
from ..core.exceptions import GeocodingUnavailable
from .provider import GeocodingProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReverseGeocodeEndpoint:
    name: str
    url: str
    params: Callable[[float, float], dict]
    parse: Callable[[Any], Optional[str]]


BIGDATACLOUD = ReverseGeocodeEndpoint(
    name="BigDataCloud",
    url="https://api.bigdatacloud.net/data/reverse-geocode-client",
    params=lambda lat, lon: {"latitude": lat, "longitude": lon, "localityLanguage": "en"},
    parse=lambda data: data.get("displayName") or data.get("locality"),
)

NOMINATIM = ReverseGeocodeEndpoint(
    name="Nominatim",
    url="https://nominatim.openstreetmap.org/reverse",
    params=lambda lat, lon: {"format": "json", "lat": lat, "lon": lon, "zoom": 18, "addressdetails": 1},
    parse=lambda data: data.get("display_name"),
)

DEFAULT_ENDPOINTS = (BIGDATACLOUD, NOMINATIM)


class HttpReverseGeocoder(GeocodingProvider):
    def __init__(
        self,
        *,
        endpoints: Sequence[ReverseGeocodeEndpoint] = DEFAULT_ENDPOINTS,
        timeout_seconds: float = DEFAULT_GEOCODER_TIMEOUT_SECONDS,
        user_agent: str = "hr-attendance/1.0",
        session: Optional[requests.Session] = None,
    ):
        self._endpoints = tuple(endpoints)
        self._timeout = float(timeout_seconds)
        self._session = session or requests.Session()
        self._headers = {"Accept": "application/json", "User-Agent": user_agent}

    def reverse(self, latitude: float, longitude: float) -> str:
        for endpoint in self._endpoints:
            try:
                resp = self._session.get(
                    endpoint.url,
                    params=endpoint.params(latitude, longitude),
                    headers=self._headers,
                    timeout=self._timeout,
                )
                resp.raise_for_status()
                address = endpoint.parse(resp.json())
            except (requests.RequestException, ValueError, AttributeError) as e:
                logger.warning("%s reverse geocoding failed: %s", endpoint.name, e)
                continue

            if address:
                return str(address)

        raise GeocodingUnavailable(f"All geocoding providers failed for {latitude}, {longitude}")
