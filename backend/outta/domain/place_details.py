from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import Listing

PLACE_HOURS_TTL = timedelta(hours=48)
PLACE_DETAILS_TTL = timedelta(days=7)

FULL_REFRESH = "full"
HOURS_REFRESH = "hours"


def _older_than(stamp: Optional[datetime], ttl: timedelta, now: datetime) -> bool:
    if stamp is None:
        return True
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return now - stamp > ttl


def is_details_stale(details_updated_at: Optional[datetime], now: datetime) -> bool:
    return _older_than(details_updated_at, PLACE_DETAILS_TTL, now)


def is_hours_stale(
    hours_updated_at: Optional[datetime],
    details_updated_at: Optional[datetime],
    now: datetime,
) -> bool:
    """Opening hours age from their own stamp, else from the full-details stamp."""
    return _older_than(hours_updated_at or details_updated_at, PLACE_HOURS_TTL, now)


def plan_refresh(listing: Listing, now: datetime) -> Optional[str]:
    """Which refresh a listing's cached place details need, if any."""
    if not listing.place_id:
        return None
    if listing.google_place_details is None or is_details_stale(listing.place_details_updated_at, now):
        return FULL_REFRESH
    if is_hours_stale(listing.place_hours_updated_at, listing.place_details_updated_at, now):
        return HOURS_REFRESH
    return None


def merge_opening_hours(existing: Optional[dict], opening_hours: Optional[dict]) -> dict:
    merged = dict(existing or {})
    merged["openingHours"] = opening_hours
    return merged
