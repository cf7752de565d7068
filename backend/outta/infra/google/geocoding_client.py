from __future__ import annotations

from typing import Optional

import httpx

from .places_client import resolve_api_key


class GeocodingClient:
    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = resolve_api_key(api_key)
        if not self.api_key:
            raise RuntimeError("GOOGLE_MAPS_API_KEY is required for GeocodingClient")
        self.timeout = timeout
        self.transport = transport

    def geocode(self, address: str) -> Optional[dict]:
        """Coordinates for ``address``; ``None`` when Google finds nothing."""
        if not address:
            return None
        params = {"address": address, "key": self.api_key}
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            resp = client.get(self.BASE_URL, params=params)
            resp.raise_for_status()
            data = resp.json()
        status = data.get("status")
        if status == "ZERO_RESULTS":
            return None
        if status != "OK" or not data.get("results"):
            raise RuntimeError(f"Geocoding failed: {status}")
        result = data["results"][0]
        location = result.get("geometry", {}).get("location", {})
        return {
            "lat": float(location["lat"]),
            "lng": float(location["lng"]),
            "formatted_address": result.get("formatted_address"),
        }


def build_address(listing: dict) -> Optional[str]:
    """Address string for geocoding a listing row.

    Street, city, state and zip when any are present, otherwise the location
    name alone.
    """
    parts = [str(listing[key]) for key in ("street", "city", "state", "zip") if listing.get(key)]
    if parts:
        return ", ".join(parts)
    return listing.get("location_name") or None
