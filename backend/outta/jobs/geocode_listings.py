from __future__ import annotations

import time
from typing import Optional

import httpx
import typer

from outta.infra.database import resolve_engine
from outta.infra.db.listings_repository import ListingsRepository
from outta.infra.google.geocoding_client import GeocodingClient, build_address

app = typer.Typer(help="Fill in coordinates for listings that only have an address")
DEFAULT_LIMIT = 250
DEFAULT_DELAY_SECONDS = 0.1


def geocode_listings(
    *,
    limit: int = DEFAULT_LIMIT,
    geocoder: Optional[GeocodingClient] = None,
    engine=None,
    database_url: Optional[str] = None,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
) -> dict:
    engine = resolve_engine(engine, database_url)
    repo = ListingsRepository(engine)
    rows = repo.list_missing_coordinates(limit=limit)
    candidates = [(row, build_address(row)) for row in rows]
    candidates = [(row, address) for row, address in candidates if address]

    stats = {
        "found": len(rows),
        "geocoded": 0,
        "errors": 0,
        "skipped": len(rows) - len(candidates),
        "results": [],
    }
    if candidates and geocoder is None:
        geocoder = GeocodingClient()

    for idx, (row, address) in enumerate(candidates, start=1):
        outcome = {"listing_id": row["id"], "title": row.get("title"), "address_used": address}
        try:
            location = geocoder.geocode(address)
        except (httpx.HTTPError, RuntimeError) as exc:
            location = None
            outcome["error"] = str(exc)
        if location is None:
            outcome.setdefault("error", "No results found")
            outcome["success"] = False
            stats["errors"] += 1
        else:
            repo.update_coordinates(row["id"], location["lat"], location["lng"])
            outcome.update(
                success=True,
                latitude=location["lat"],
                longitude=location["lng"],
                formatted_address=location.get("formatted_address"),
            )
            stats["geocoded"] += 1
        stats["results"].append(outcome)
        if delay_seconds and idx < len(candidates):
            time.sleep(delay_seconds)

    print(
        f"[geocode_listings] found={stats['found']} geocoded={stats['geocoded']} "
        f"errors={stats['errors']} skipped={stats['skipped']}"
    )
    return stats


@app.command()
def run(limit: int = typer.Option(DEFAULT_LIMIT, help="Maximum listings to geocode")):
    geocode_listings(limit=limit)


if __name__ == "__main__":
    app()
