from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

LISTING_TYPES = ("Event", "Activity", "Camp")
EVENT = "Event"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text.replace("Z", "+00:00")
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


@dataclass(frozen=True)
class Listing:
    id: str
    title: str
    type: str
    external_id: Optional[str] = None
    place_type: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_name: Optional[str] = None
    start_date: Optional[datetime] = None
    description: Optional[str] = None
    image: Optional[str] = None
    unsplash_photo_id: Optional[str] = None
    organizer: Optional[str] = None
    website: Optional[str] = None
    tags: Optional[str] = None
    recommended: bool = False
    hidden: bool = False
    place_id: Optional[str] = None
    google_place_details: Optional[dict] = None
    place_details_updated_at: Optional[datetime] = None
    place_hours_updated_at: Optional[datetime] = None
    distance: Optional[float] = field(default=None, compare=False)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Listing":
        """Build a listing from a loosely-typed DB row or JSON object.

        Unparseable coordinates and timestamps become ``None``.
        """
        zip_code = row.get("zip")
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            type=row.get("type") or "",
            external_id=row.get("external_id"),
            place_type=row.get("place_type") or None,
            street=row.get("street"),
            city=row.get("city"),
            state=row.get("state"),
            zip=str(zip_code) if zip_code not in (None, "") else None,
            latitude=_parse_float(row.get("latitude")),
            longitude=_parse_float(row.get("longitude")),
            location_name=row.get("location_name"),
            start_date=_parse_datetime(row.get("start_date")),
            description=row.get("description"),
            image=row.get("image"),
            unsplash_photo_id=row.get("unsplash_photo_id"),
            organizer=row.get("organizer"),
            website=row.get("website"),
            tags=row.get("tags"),
            recommended=bool(row.get("recommended")),
            hidden=bool(row.get("hidden")),
            place_id=row.get("place_id"),
            google_place_details=row.get("google_place_details"),
            place_details_updated_at=_parse_datetime(row.get("place_details_updated_at")),
            place_hours_updated_at=_parse_datetime(row.get("place_hours_updated_at")),
            distance=_parse_float(row.get("distance")),
        )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def is_event(self) -> bool:
        return self.type == EVENT

    def with_distance(self, distance: Optional[float]) -> "Listing":
        return replace(self, distance=distance)

    def to_dict(self) -> dict:
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            payload[f.name] = value
        if self.distance is None:
            payload.pop("distance")
        return payload


@dataclass(frozen=True)
class Source:
    id: str
    name: str
    url: str
    logo: Optional[str] = None
    featured_source: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Source":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            url=row.get("url") or "",
            logo=row.get("logo") or None,
            featured_source=bool(row.get("featured_source")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PlaceDetails:
    photos: list = field(default_factory=list)
    opening_hours: Optional[dict] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    reviews: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, blob: Mapping[str, Any]) -> "PlaceDetails":
        return cls(
            photos=list(blob.get("photos") or []),
            opening_hours=blob.get("openingHours"),
            rating=blob.get("rating"),
            user_ratings_total=blob.get("userRatingsTotal"),
            reviews=list(blob.get("reviews") or []),
        )

    def to_dict(self) -> dict:
        return {
            "photos": self.photos,
            "openingHours": self.opening_hours,
            "rating": self.rating,
            "userRatingsTotal": self.user_ratings_total,
            "reviews": self.reviews,
        }

