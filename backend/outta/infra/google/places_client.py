from __future__ import annotations

import os
from typing import List, Optional

import httpx

from outta.domain.models import PlaceDetails


def resolve_api_key(api_key: Optional[str] = None) -> Optional[str]:
    return api_key or os.getenv("GOOGLE_PLACES_API_KEY") or os.getenv("GOOGLE_MAPS_API_KEY")


class PlacesApiError(RuntimeError):
    def __init__(self, place_id: str, status: Optional[str]):
        super().__init__(f"Google Places error for {place_id}: {status}")
        self.place_id = place_id
        self.status = status


class GooglePlacesClient:
    DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
    PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
    DETAIL_FIELDS = ["photos", "opening_hours", "rating", "user_ratings_total", "reviews", "types"]
    MAX_PHOTOS = 10
    MAX_REVIEWS = 5
    PHOTO_MAX_WIDTH = 800

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = resolve_api_key(api_key)
        if not self.api_key:
            raise RuntimeError("GOOGLE_PLACES_API_KEY is required for GooglePlacesClient")
        self.timeout = timeout
        self.transport = transport

    def fetch_place_details(self, place_id: str) -> tuple[PlaceDetails, List[str]]:
        """Photos, hours, rating and reviews plus the Google place types.

        Raises ``PlacesApiError`` when Google answers with a non-OK status.
        """
        result = self._fetch(place_id, self.DETAIL_FIELDS)
        return self._map_details(result), list(result.get("types") or [])

    def fetch_opening_hours(self, place_id: str) -> Optional[dict]:
        result = self._fetch(place_id, ["opening_hours"])
        return self._map_opening_hours(result.get("opening_hours"))

    def photo_url(self, photo_reference: str, max_width: int = PHOTO_MAX_WIDTH) -> str:
        return f"{self.PHOTO_URL}?maxwidth={max_width}&photo_reference={photo_reference}&key={self.api_key}"

    def _fetch(self, place_id: str, fields: List[str]) -> dict:
        params = {"place_id": place_id, "fields": ",".join(fields), "key": self.api_key}
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            resp = client.get(self.DETAILS_URL, params=params)
            resp.raise_for_status()
            data = resp.json()
        if data.get("status") != "OK":
            raise PlacesApiError(place_id, data.get("status"))
        return data.get("result") or {}

    def _map_details(self, result: dict) -> PlaceDetails:
        photos = [
            {
                "url": self.photo_url(photo.get("photo_reference", "")),
                "width": photo.get("width"),
                "height": photo.get("height"),
            }
            for photo in (result.get("photos") or [])[: self.MAX_PHOTOS]
        ]
        reviews = [
            {
                "authorName": review.get("author_name"),
                "rating": review.get("rating"),
                "text": review.get("text"),
                "relativeTimeDescription": review.get("relative_time_description"),
            }
            for review in (result.get("reviews") or [])[: self.MAX_REVIEWS]
        ]
        return PlaceDetails(
            photos=photos,
            opening_hours=self._map_opening_hours(result.get("opening_hours")),
            rating=result.get("rating"),
            user_ratings_total=result.get("user_ratings_total"),
            reviews=reviews,
        )

    @staticmethod
    def _map_opening_hours(hours: Optional[dict]) -> Optional[dict]:
        if not hours:
            return None
        return {"isOpen": hours.get("open_now"), "weekdayText": hours.get("weekday_text") or []}
