from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Engine

from outta.api.deps import get_cache, get_engine, parse_location
from outta.domain.geo import add_distance
from outta.domain.models import Listing
from outta.infra.cache.read_through import ReadThroughCache, listings_cache_key, search_cache_key
from outta.infra.db.listings_repository import ListingsRepository

router = APIRouter(tags=["listings"])

LISTING_TYPE_PATTERN = "^(Event|Activity|Camp)$"


@router.get("/listings")
def list_listings(
    listing_type: Optional[str] = Query(None, alias="type", pattern=LISTING_TYPE_PATTERN),
    recommended: bool = Query(False),
    city: Optional[str] = Query(None),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    lat: Optional[str] = Query(None, description="Caller latitude"),
    lng: Optional[str] = Query(None, description="Caller longitude"),
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
):
    user_lat, user_lng = parse_location(lat, lng)
    cache_key = listings_cache_key(
        {
            "type": listing_type,
            "recommended": "true" if recommended else None,
            "city": city or None,
            "lat": user_lat,
            "lng": user_lng,
            "limit": limit,
            "offset": offset,
        }
    )

    def fetch():
        rows, count = ListingsRepository(engine).query_listings(
            listing_type=listing_type,
            recommended=recommended,
            city=city,
            limit=limit,
            offset=offset,
        )
        return _envelope(rows, count, limit=limit, offset=offset, lat=user_lat, lng=user_lng)

    return cache.get_cached_data(cache_key, fetch)


@router.get("/search")
def search_listings(
    q: str = Query(""),
    listing_type: Optional[str] = Query(None, alias="type", pattern=LISTING_TYPE_PATTERN),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
):
    query = q.strip()
    cache_key = search_cache_key(query, listing_type, limit, offset)

    def fetch():
        rows, count = ListingsRepository(engine).search_listings(
            query,
            listing_type=listing_type,
            limit=limit,
            offset=offset,
        )
        return _envelope(rows, count, limit=limit, offset=offset)

    return cache.get_cached_data(cache_key, fetch)


def _envelope(rows, count: int, *, limit: int, offset: int, lat=None, lng=None) -> dict:
    listings = add_distance([Listing.from_row(row) for row in rows], lat, lng)
    return {
        "data": [listing.to_dict() for listing in listings],
        "count": count,
        "hasMore": offset + limit < count,
    }
