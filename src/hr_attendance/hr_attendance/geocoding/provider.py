from __future__ import annotations

from typing import Protocol


class GeocodingProvider(Protocol):
    def reverse(self, latitude: float, longitude: float) -> str:
        """Resolve a coordinate to a display address.

        Raises GeocodingUnavailable when no address can be produced.
        """

        raise NotImplementedError


def coordinate_label(latitude: float, longitude: float) -> str:
    """Fallback address used when reverse geocoding fails."""
    return f"{latitude:.6f}, {longitude:.6f}"
