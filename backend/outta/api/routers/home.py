from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Engine

from outta.api.deps import get_cache, get_engine, get_today, parse_location
from outta.domain.filters import (
    DEFAULT_MAX_DISTANCE_MILES,
    filter_by_place_type,
    filter_events,
    get_event_count,
    get_place_type_counts,
)
from outta.domain.geo import add_distance
from outta.domain.models import Listing
from outta.infra.cache.read_through import ReadThroughCache, home_cache_key
from outta.infra.db.listings_repository import ListingsRepository

router = APIRouter(tags=["home"])


@router.get("/home")
def get_home(
    lat: Optional[str] = Query(None, description="Caller latitude"),
    lng: Optional[str] = Query(None, description="Caller longitude"),
    max_distance: float = Query(DEFAULT_MAX_DISTANCE_MILES, gt=0),
    limit: int = Query(20, ge=1, le=200),
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
    today: date = Depends(get_today),
):
    """Homepage tabs: upcoming nearby events plus the place-type counters."""
    user_lat, user_lng = parse_location(lat, lng)
    cache_key = home_cache_key(
        {
            "lat": user_lat,
            "lng": user_lng,
            "max_distance": max_distance,
            "limit": limit,
            "today": today.isoformat(),
        }
    )

    def fetch():
        listings = _load_listings(engine, user_lat, user_lng)
        events = filter_events(listings, max_distance, today=today)
        return {
            "events": [listing.to_dict() for listing in events[:limit]],
            "eventCount": get_event_count(listings, max_distance, today=today),
            "placeTypes": get_place_type_counts(listings, today=today),
        }

    return cache.get_cached_data(cache_key, fetch)


@router.get("/filter/{place_type}")
def get_place_type_listings(
    place_type: str,
    lat: Optional[str] = Query(None, description="Caller latitude"),
    lng: Optional[str] = Query(None, description="Caller longitude"),
    limit: int = Query(50, ge=1, le=500),
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
    today: date = Depends(get_today),
):
    user_lat, user_lng = parse_location(lat, lng)
    cache_key = home_cache_key(
        {
            "place_type": place_type.strip().lower(),
            "lat": user_lat,
            "lng": user_lng,
            "limit": limit,
            "today": today.isoformat(),
        }
    )

    def fetch():
        listings = _load_listings(engine, user_lat, user_lng)
        matches = filter_by_place_type(listings, place_type, today=today)
        return {
            "count": len(matches),
            "data": [listing.to_dict() for listing in matches[:limit]],
        }

    # The cached payload is shared by every spelling of the type.
    return {"placeType": place_type, **cache.get_cached_data(cache_key, fetch)}


def _load_listings(engine: Engine, lat: Optional[float], lng: Optional[float]) -> List[Listing]:
    rows = ListingsRepository(engine).list_visible_listings()
    return add_distance([Listing.from_row(row) for row in rows], lat, lng)
