from __future__ import annotations

import time
from typing import List, Optional, Set, Tuple

import httpx
import typer

from outta.domain.image_search import build_search_terms
from outta.infra.database import resolve_engine
from outta.infra.db.listings_repository import ListingsRepository
from outta.infra.unsplash.client import UnsplashClient

app = typer.Typer(help="Give listings without an image a stock photo from Unsplash")
DEFAULT_LIMIT = 50
DEFAULT_DELAY_SECONDS = 0.2
SEARCH_DELAY_SECONDS = 0.1


def pick_photo(photos: List[dict], used_photo_ids: Set[str]) -> dict:
    """First photo not used by another listing, else the top result."""
    for photo in photos:
        if photo["id"] not in used_photo_ids:
            return photo
    return photos[0]


def find_photo(
    client: UnsplashClient,
    search_terms: List[str],
    used_photo_ids: Set[str],
    *,
    delay_seconds: float = SEARCH_DELAY_SECONDS,
) -> Tuple[Optional[dict], Optional[str], int]:
    """Try each search term in order; returns ``(photo, term, attempt)``."""
    for attempt, term in enumerate(search_terms, start=1):
        try:
            photos = client.search_photos(term)
        except httpx.HTTPError as exc:
            print(f"[fetch_listing_images] WARNING: search '{term}' failed ({exc})")
            continue
        if photos:
            return pick_photo(photos, used_photo_ids), term, attempt
        if delay_seconds:
            time.sleep(delay_seconds)
    return None, None, len(search_terms)


def fetch_listing_images(
    *,
    limit: int = DEFAULT_LIMIT,
    dry_run: bool = False,
    client: Optional[UnsplashClient] = None,
    engine=None,
    database_url: Optional[str] = None,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
    search_delay_seconds: float = SEARCH_DELAY_SECONDS,
) -> dict:
    engine = resolve_engine(engine, database_url)
    repo = ListingsRepository(engine)
    used_photo_ids = repo.list_used_photo_ids()
    rows = repo.list_missing_images(limit=limit)

    stats = {"found": len(rows), "added": 0, "errors": 0, "unique_photos": 0, "dry_run": dry_run, "results": []}
    if rows and not dry_run and client is None:
        client = UnsplashClient()

    for idx, row in enumerate(rows, start=1):
        search_terms = build_search_terms(row.get("title") or "", row.get("tags"))
        outcome = {"listing_id": row["id"], "title": row.get("title")}
        if dry_run:
            outcome["search_terms"] = search_terms
            stats["results"].append(outcome)
            continue

        photo, term, attempt = find_photo(client, search_terms, used_photo_ids, delay_seconds=search_delay_seconds)
        if photo is None or not photo.get("url"):
            outcome.update(success=False, error="All search attempts failed")
            stats["errors"] += 1
        else:
            repo.update_image(row["id"], photo["url"], photo["id"])
            used_photo_ids.add(photo["id"])
            outcome.update(
                success=True,
                image_url=photo["url"],
                photographer=photo.get("photographer"),
                photo_id=photo["id"],
                search_term=term,
                attempt=attempt,
            )
            stats["added"] += 1
        stats["results"].append(outcome)
        if delay_seconds and idx < len(rows):
            time.sleep(delay_seconds)

    stats["unique_photos"] = len(used_photo_ids)
    print(
        f"[fetch_listing_images] found={stats['found']} added={stats['added']} errors={stats['errors']} "
        f"unique_photos={stats['unique_photos']} dry_run={dry_run}"
    )
    return stats


@app.command()
def run(
    limit: int = typer.Option(DEFAULT_LIMIT, help="Maximum listings to process"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show search terms without calling Unsplash"),
):
    fetch_listing_images(limit=limit, dry_run=dry_run)


if __name__ == "__main__":
    app()
