from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from outta.api.deps import get_engine
from outta.domain.models import Source
from outta.infra.db.listings_repository import ListingsRepository
from outta.infra.db.sources_repository import SourcesRepository

router = APIRouter(tags=["places"])


@router.get("/place-details")
def get_place_details(
    place_id: Optional[str] = Query(None),
    engine: Engine = Depends(get_engine),
):
    """
    Cached Google place details for a listing. Google itself is never called
    here; the refresh job keeps the stored copy current.
    """
    if not place_id:
        raise HTTPException(status_code=400, detail="place_id is required")
    details = ListingsRepository(engine).get_place_details(place_id)
    if details is None:
        raise HTTPException(status_code=404, detail="No cached data available")
    return details


@router.get("/sources")
def list_sources(
    featured: bool = Query(False),
    engine: Engine = Depends(get_engine),
):
    rows = SourcesRepository(engine).list_sources(featured_only=featured)
    return [Source.from_row(row).to_dict() for row in rows]
