from __future__ import annotations

from datetime import date, datetime
from typing import Callable

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Engine

from outta.api.deps import (
    get_cache,
    get_clock,
    get_engine,
    get_geocoder,
    get_image_client,
    get_today,
    require_cron_secret,
)
from outta.infra.cache.read_through import ReadThroughCache
from outta.infra.google.geocoding_client import GeocodingClient
from outta.infra.unsplash.client import UnsplashClient
from outta.jobs.fetch_listing_images import fetch_listing_images
from outta.jobs.geocode_listings import geocode_listings
from outta.jobs.hide_stale_events import hide_stale_events

router = APIRouter(tags=["maintenance"], dependencies=[Depends(require_cron_secret)])

LISTING_CACHE_PATTERNS = ("listings:*", "search:*", "home:*")
GEOCODE_DELAY_SECONDS = 0.1
IMAGE_DELAY_SECONDS = 0.2


def _invalidate_listing_caches(cache: ReadThroughCache) -> int:
    return sum(cache.invalidate_cache(pattern) for pattern in LISTING_CACHE_PATTERNS)


@router.api_route("/hide-stale-events", methods=["GET", "POST"])
def run_hide_stale_events(
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
    clock: Callable[[], datetime] = Depends(get_clock),
    today: date = Depends(get_today),
):
    stats = hide_stale_events(update=True, today=today, engine=engine)
    invalidated = _invalidate_listing_caches(cache) if stats["hidden"] else 0
    return {
        "success": True,
        "timestamp": clock().isoformat(),
        "hidden": stats["hidden"],
        "errors": stats["errors"],
        "invalidated": invalidated,
    }


@router.post("/geocode-listings")
def run_geocode_listings(
    limit: int = Query(250, ge=1, le=1000),
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    stats = geocode_listings(limit=limit, geocoder=geocoder, engine=engine, delay_seconds=GEOCODE_DELAY_SECONDS)
    if stats["geocoded"]:
        _invalidate_listing_caches(cache)
    return {"success": True, **stats}


@router.post("/fetch-unsplash-images")
def run_fetch_unsplash_images(
    limit: int = Query(50, ge=1, le=500),
    engine: Engine = Depends(get_engine),
    cache: ReadThroughCache = Depends(get_cache),
    clock: Callable[[], datetime] = Depends(get_clock),
    image_client: UnsplashClient = Depends(get_image_client),
):
    stats = fetch_listing_images(limit=limit, client=image_client, engine=engine, delay_seconds=IMAGE_DELAY_SECONDS)
    if stats["added"]:
        _invalidate_listing_caches(cache)
    return {
        "success": True,
        "timestamp": clock().isoformat(),
        "total": stats["found"],
        "imagesAdded": stats["added"],
        "errors": stats["errors"],
        "uniquePhotosUsed": stats["unique_photos"],
        "results": stats["results"],
    }
