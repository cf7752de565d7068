from __future__ import annotations

import os
from collections import Counter
from datetime import date, datetime, tzinfo
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from .models import Listing

LOCAL_TZ = ZoneInfo(os.getenv("OUTTA_TIMEZONE", "America/Los_Angeles"))
DEFAULT_MAX_DISTANCE_MILES = 50.0


def local_today(now: Optional[datetime] = None, tz: tzinfo = LOCAL_TZ) -> date:
    """Calendar day of ``now`` (wall clock when omitted) in the local zone."""
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def is_current(listing: Listing, today: date, tz: tzinfo = LOCAL_TZ) -> bool:
    # Undated listings (standing activities) never expire.
    if listing.start_date is None:
        return True
    return listing.start_date.astimezone(tz).date() >= today


def _distance(listing: Listing) -> float:
    # Unknown distance (no caller location) counts as 0.
    return listing.distance if listing.distance is not None else 0.0


def _is_upcoming_event(listing: Listing, max_distance_miles: float, today: date) -> bool:
    return (
        listing.is_event
        and listing.has_coordinates
        and listing.start_date is not None
        and is_current(listing, today)
        and _distance(listing) <= max_distance_miles
    )


def filter_events(
    listings: Iterable[Listing],
    max_distance_miles: float = DEFAULT_MAX_DISTANCE_MILES,
    *,
    today: Optional[date] = None,
) -> List[Listing]:
    """Upcoming events within range, soonest first, nearest first on ties."""
    today = today or local_today()
    events = [listing for listing in listings if _is_upcoming_event(listing, max_distance_miles, today)]
    events.sort(key=lambda listing: (listing.start_date, _distance(listing)))
    return events


def filter_by_place_type(
    listings: Iterable[Listing],
    place_type: str,
    *,
    today: Optional[date] = None,
) -> List[Listing]:
    today = today or local_today()
    wanted = place_type.strip().lower()
    matches = [
        listing
        for listing in listings
        if listing.has_coordinates
        and listing.place_type is not None
        and listing.place_type.strip().lower() == wanted
        and is_current(listing, today)
    ]
    matches.sort(key=_distance)
    return matches


def get_place_type_counts(listings: Iterable[Listing], *, today: Optional[date] = None) -> List[dict]:
    """Counts per place type, matched case-insensitively like ``filter_by_place_type``.

    Each bucket is labelled with the first spelling seen.
    """
    today = today or local_today()
    counts: Counter = Counter()
    labels: Dict[str, str] = {}
    for listing in listings:
        label = (listing.place_type or "").strip()
        if not label or not listing.has_coordinates:
            continue
        if not is_current(listing, today):
            continue
        key = label.lower()
        labels.setdefault(key, label)
        counts[key] += 1
    ordered = sorted(counts.items(), key=lambda item: (-item[1], labels[item[0]]))
    return [{"type": labels[key], "count": count} for key, count in ordered]


def get_event_count(
    listings: Iterable[Listing],
    max_distance_miles: float = DEFAULT_MAX_DISTANCE_MILES,
    *,
    today: Optional[date] = None,
) -> int:
    today = today or local_today()
    return sum(1 for listing in listings if _is_upcoming_event(listing, max_distance_miles, today))
