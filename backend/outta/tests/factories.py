from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import insert

from outta.domain.filters import LOCAL_TZ
from outta.domain.models import Listing
from outta.infra.db.tables import listings_table, sources_table

TODAY = date(2026, 3, 10)
# 10:00 local time on TODAY
NOW_UTC = datetime(2026, 3, 10, 17, 0, tzinfo=timezone.utc)
SF = (37.77, -122.42)
OAKLAND = (37.80, -122.27)
SACRAMENTO = (38.58, -121.49)


def local_dt(day: date, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=LOCAL_TZ)


def make_listing(listing_id: str = "l1", **overrides) -> Listing:
    payload = {
        "id": listing_id,
        "title": f"Listing {listing_id}",
        "type": "Event",
        "latitude": SF[0],
        "longitude": SF[1],
        "start_date": local_dt(TODAY, 18),
    }
    payload.update(overrides)
    return Listing(**payload)


def listing_row(listing_id: str, **overrides) -> dict:
    row = {
        "id": listing_id,
        "external_id": f"ext-{listing_id}",
        "title": f"Listing {listing_id}",
        "type": "Event",
        "place_type": None,
        "description": None,
        "street": None,
        "city": "San Francisco",
        "state": "CA",
        "zip": None,
        "latitude": SF[0],
        "longitude": SF[1],
        "location_name": None,
        "start_date": local_dt(TODAY, 18),
        "tags": None,
        "image": None,
        "unsplash_photo_id": None,
        "organizer": None,
        "recommended": False,
        "hidden": False,
        "place_id": None,
        "google_place_details": None,
        "place_details_updated_at": None,
        "place_hours_updated_at": None,
    }
    row.update(overrides)
    for key, value in row.items():
        if isinstance(value, datetime):
            # SQLite drops offsets, so rows are stored in UTC like Postgres timestamptz
            row[key] = value.astimezone(timezone.utc)
    return row


def seed_listings(engine, *rows: dict) -> None:
    with engine.begin() as conn:
        conn.execute(insert(listings_table), list(rows))


def seed_sources(engine, *rows: dict) -> None:
    with engine.begin() as conn:
        conn.execute(insert(sources_table), list(rows))
