from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional

import httpx
import typer

from outta.domain.models import Listing
from outta.domain.place_details import FULL_REFRESH, HOURS_REFRESH, merge_opening_hours, plan_refresh
from outta.domain.place_types import OTHER, determine_category
from outta.infra.database import resolve_engine
from outta.infra.db.listings_repository import REFRESH_MISSING, REFRESH_MODES, REFRESH_STALE, ListingsRepository
from outta.infra.google.places_client import GooglePlacesClient, PlacesApiError

app = typer.Typer(help="Refresh cached Google place details on listings")
DEFAULT_DELAY_SECONDS = 0.1


def refresh_place_details(
    *,
    mode: str = REFRESH_MISSING,
    place_id: Optional[str] = None,
    limit: int = 100,
    dry_run: bool = False,
    client: Optional[GooglePlacesClient] = None,
    engine=None,
    database_url: Optional[str] = None,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
    now: Optional[datetime] = None,
) -> dict:
    if mode not in REFRESH_MODES:
        raise ValueError(f"mode must be one of {', '.join(REFRESH_MODES)}")
    engine = resolve_engine(engine, database_url)
    repo = ListingsRepository(engine)
    now = now or datetime.now(timezone.utc)

    rows = repo.list_for_place_refresh(mode=mode, place_id=place_id, limit=limit, now=now)
    stats = {"selected": len(rows), "full": 0, "hours": 0, "skipped": 0, "failed": 0, "dry_run": dry_run}
    if rows and not dry_run and client is None:
        client = GooglePlacesClient()

    for idx, row in enumerate(rows, start=1):
        listing = Listing.from_row(row)
        action = _choose_action(listing, mode=mode, forced=bool(place_id), now=now)
        if action is None:
            stats["skipped"] += 1
            continue
        if dry_run:
            print(f"[refresh_place_details] would refresh ({action}) {listing.title} ({listing.place_id})")
            stats[action] += 1
            continue
        try:
            if action == FULL_REFRESH:
                _refresh_full(repo, client, listing, now)
            else:
                _refresh_hours(repo, client, listing, now)
        except (httpx.HTTPError, PlacesApiError) as exc:
            print(f"[refresh_place_details] WARNING: {listing.place_id} failed ({exc})")
            stats["failed"] += 1
        else:
            stats[action] += 1
        if delay_seconds and idx < len(rows):
            time.sleep(delay_seconds)

    print(
        f"[refresh_place_details] mode={mode} selected={stats['selected']} full={stats['full']} "
        f"hours={stats['hours']} skipped={stats['skipped']} failed={stats['failed']} dry_run={dry_run}"
    )
    return stats


def _choose_action(listing: Listing, *, mode: str, forced: bool, now: datetime) -> Optional[str]:
    if forced or mode != REFRESH_STALE:
        return FULL_REFRESH
    return plan_refresh(listing, now)


def _refresh_full(repo: ListingsRepository, client: GooglePlacesClient, listing: Listing, now: datetime) -> None:
    details, google_types = client.fetch_place_details(listing.place_id)
    place_type = None
    if not listing.place_type:
        category = determine_category(
            google_types=google_types,
            venue_name=listing.location_name,
            title=listing.title,
            description=listing.description,
        )
        place_type = category if category != OTHER else None
    repo.update_place_details(listing.id, details.to_dict(), place_type=place_type, now=now)


def _refresh_hours(repo: ListingsRepository, client: GooglePlacesClient, listing: Listing, now: datetime) -> None:
    opening_hours = client.fetch_opening_hours(listing.place_id)
    merged = merge_opening_hours(listing.google_place_details, opening_hours)
    repo.update_place_details(listing.id, merged, hours_only=True, now=now)


@app.command()
def run(
    mode: str = typer.Option(REFRESH_MISSING, help="missing, stale or all"),
    place_id: Optional[str] = typer.Option(None, help="Refresh a single Google place id"),
    limit: int = typer.Option(100, help="Maximum listings to process"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List what would be refreshed"),
):
    refresh_place_details(mode=mode, place_id=place_id, limit=limit, dry_run=dry_run)


if __name__ == "__main__":
    app()
