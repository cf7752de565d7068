import json
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer

from outta.domain.filters import DEFAULT_MAX_DISTANCE_MILES, filter_events, get_place_type_counts
from outta.domain.geo import add_distance
from outta.domain.models import Listing
from outta.infra.cache.read_through import build_cache_from_env

app = typer.Typer(help="Explore Outta listings from a JSON export")


def _load_listings(path: Path) -> List[Listing]:
    payload = json.loads(path.read_text())
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return [Listing.from_row(item) for item in payload]


def _parse_today(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


@app.command("events")
def cli_events(
    file: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON file with listings"),
    lat: Optional[float] = typer.Option(None, help="Caller latitude"),
    lng: Optional[float] = typer.Option(None, help="Caller longitude"),
    max_distance: float = typer.Option(DEFAULT_MAX_DISTANCE_MILES, help="Maximum distance in miles"),
    today: Optional[str] = typer.Option(None, help="Override today's date YYYY-MM-DD"),
    limit: int = typer.Option(10, help="Number of events to show"),
):
    listings = add_distance(_load_listings(file), lat, lng)
    events = filter_events(listings, max_distance, today=_parse_today(today))
    if not events:
        typer.echo("No upcoming events found")
        raise typer.Exit(code=0)
    typer.echo("start\tdistance\ttitle")
    for event in events[:limit]:
        distance = f"{event.distance:.1f}" if event.distance is not None else "-"
        typer.echo(f"{event.start_date.isoformat()}\t{distance}\t{event.title}")


@app.command("place-types")
def cli_place_types(
    file: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON file with listings"),
    today: Optional[str] = typer.Option(None, help="Override today's date YYYY-MM-DD"),
):
    counts = get_place_type_counts(_load_listings(file), today=_parse_today(today))
    if not counts:
        typer.echo("No place types found")
        raise typer.Exit(code=0)
    typer.echo("type\tcount")
    for entry in counts:
        typer.echo(f"{entry['type']}\t{entry['count']}")


@app.command("invalidate-cache")
def cli_invalidate_cache(
    pattern: str = typer.Option("listings:*", help="Glob pattern of keys to delete"),
):
    removed = build_cache_from_env().invalidate_cache(pattern)
    typer.echo(f"Removed {removed} cache keys matching {pattern}")


if __name__ == "__main__":
    app()
