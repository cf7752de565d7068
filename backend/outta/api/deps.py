from __future__ import annotations

import math
import os
from datetime import date, datetime, timezone
from typing import Callable, Optional, Tuple

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.engine import Engine

from outta.domain.filters import local_today
from outta.infra.cache.read_through import ReadThroughCache
from outta.infra.google.geocoding_client import GeocodingClient
from outta.infra.unsplash.client import UnsplashClient


def get_engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "db_engine", None)
    if engine is None:
        raise HTTPException(status_code=500, detail="Database engine not configured")
    return engine


def get_cache(request: Request) -> ReadThroughCache:
    return request.app.state.cache


def get_clock(request: Request) -> Callable[[], datetime]:
    return getattr(request.app.state, "clock", None) or (lambda: datetime.now(timezone.utc))


def get_today(clock: Callable[[], datetime] = Depends(get_clock)) -> date:
    return local_today(clock())


def get_geocoder(request: Request) -> GeocodingClient:
    geocoder = getattr(request.app.state, "geocoder", None)
    if geocoder is None:
        try:
            geocoder = GeocodingClient()
        except RuntimeError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        request.app.state.geocoder = geocoder
    return geocoder


def get_image_client(request: Request) -> UnsplashClient:
    client = getattr(request.app.state, "image_client", None)
    if client is None:
        try:
            client = UnsplashClient()
        except RuntimeError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        request.app.state.image_client = client
    return client


def require_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    secret = os.getenv("CRON_SECRET")
    if not secret or authorization != f"Bearer {secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")


def parse_coordinate(value: Optional[str]) -> Optional[float]:
    """Caller coordinates that do not parse are treated as not supplied."""
    if value is None or value.strip() == "":
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def parse_location(lat: Optional[str], lng: Optional[str]) -> Tuple[Optional[float], Optional[float]]:
    """Both coordinates, or neither when either is missing or malformed."""
    user_lat, user_lng = parse_coordinate(lat), parse_coordinate(lng)
    if user_lat is None or user_lng is None:
        return None, None
    return user_lat, user_lng
