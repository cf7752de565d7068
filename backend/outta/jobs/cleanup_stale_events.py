from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Optional

import typer

from outta.domain.filters import local_today
from outta.infra.database import resolve_engine
from outta.infra.db.listings_repository import ListingsRepository
from outta.jobs.hide_stale_events import start_of_local_day

app = typer.Typer(help="Delete past events that never got a location")

SOURCE_PREFIXES = (
    ("rec", "Legacy Airtable"),
    ("ebparks", "East Bay Parks"),
    ("eventbrite", "Eventbrite"),
)


def source_label(row: dict) -> str:
    external_id = row.get("external_id") or ""
    for prefix, label in SOURCE_PREFIXES:
        if external_id.startswith(prefix):
            return label
    if row.get("organizer"):
        return row["organizer"][:30]
    return "Unknown"


def cleanup_stale_events(
    *,
    delete: bool = False,
    today: Optional[date] = None,
    engine=None,
    database_url: Optional[str] = None,
) -> dict:
    """Delete listings dated before today that have no coordinates.

    Dry run unless ``delete`` is set.
    """
    engine = resolve_engine(engine, database_url)
    repo = ListingsRepository(engine)
    today = today or local_today()
    cutoff = start_of_local_day(today)

    stale = repo.list_past_listings_without_coordinates(cutoff)
    by_source = Counter(source_label(row) for row in stale)
    deleted = 0
    errors = 0
    if delete and stale:
        deleted, errors = repo.delete_listings([row["id"] for row in stale])

    stats = {
        "cutoff": cutoff.isoformat(),
        "found": len(stale),
        "deleted": deleted,
        "errors": errors,
        "by_source": dict(by_source.most_common()),
        "dry_run": not delete,
    }
    for label, count in by_source.most_common():
        print(f"[cleanup_stale_events] source={label} count={count}")
    print(
        f"[cleanup_stale_events] today={today} found={stats['found']} deleted={deleted} "
        f"errors={errors} dry_run={stats['dry_run']}"
    )
    return stats


@app.command()
def run(
    delete: bool = typer.Option(False, "--delete", help="Actually delete records (default is a dry run)"),
    today: Optional[str] = typer.Option(None, help="Override today's date YYYY-MM-DD"),
):
    parsed = date.fromisoformat(today) if today else None
    cleanup_stale_events(delete=delete, today=parsed)


if __name__ == "__main__":
    app()
