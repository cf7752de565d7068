from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional

import typer

from outta.domain.filters import LOCAL_TZ, local_today
from outta.infra.database import resolve_engine
from outta.infra.db.listings_repository import ListingsRepository

app = typer.Typer(help="Hide listings whose start date has already passed")


def start_of_local_day(today: date) -> datetime:
    return datetime.combine(today, time.min, tzinfo=LOCAL_TZ).astimezone(timezone.utc)


def hide_stale_events(
    *,
    update: bool = False,
    today: Optional[date] = None,
    engine=None,
    database_url: Optional[str] = None,
) -> dict:
    """Find listings dated before the start of today and, with ``update``, hide them.

    Without ``update`` this is a dry run that only reports what would be hidden.
    """
    engine = resolve_engine(engine, database_url)
    repo = ListingsRepository(engine)
    today = today or local_today()
    cutoff = start_of_local_day(today)

    stale = repo.list_stale_listings(cutoff)
    hidden = 0
    errors = 0
    if update and stale:
        hidden, errors = repo.hide_listings([row["id"] for row in stale])

    stats = {
        "cutoff": cutoff.isoformat(),
        "found": len(stale),
        "hidden": hidden,
        "errors": errors,
        "dry_run": not update,
    }
    print(
        f"[hide_stale_events] today={today} found={stats['found']} hidden={hidden} "
        f"errors={errors} dry_run={stats['dry_run']}"
    )
    return stats


@app.command()
def run(
    update: bool = typer.Option(False, "--update", help="Actually hide records (default is a dry run)"),
    today: Optional[str] = typer.Option(None, help="Override today's date YYYY-MM-DD"),
):
    parsed = date.fromisoformat(today) if today else None
    hide_stale_events(update=update, today=parsed)


if __name__ == "__main__":
    app()
