from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from outta.domain.place_details import PLACE_DETAILS_TTL, PLACE_HOURS_TTL

from .tables import listings_table

logger = logging.getLogger(__name__)

STALE_PAGE_SIZE = 1000
HIDE_BATCH_SIZE = 500
DELETE_BATCH_SIZE = 100

REFRESH_MISSING = "missing"
REFRESH_STALE = "stale"
REFRESH_ALL = "all"
REFRESH_MODES = (REFRESH_MISSING, REFRESH_STALE, REFRESH_ALL)


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ListingsRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def query_listings(
        self,
        *,
        listing_type: Optional[str] = None,
        recommended: bool = False,
        city: Optional[str] = None,
        limit: int = 15,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        filters = [self._visible()]
        if listing_type:
            filters.append(listings_table.c.type == listing_type)
        if recommended:
            filters.append(listings_table.c.recommended.is_(True))
        if city:
            filters.append(listings_table.c.city == city)
        return self._page(filters, limit=limit, offset=offset)

    def search_listings(
        self,
        query: str,
        *,
        listing_type: Optional[str] = None,
        limit: int = 15,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        filters = [self._visible()]
        if query:
            term = f"%{query}%"
            filters.append(
                or_(
                    listings_table.c.title.ilike(term),
                    listings_table.c.description.ilike(term),
                    listings_table.c.city.ilike(term),
                    listings_table.c.tags.ilike(term),
                )
            )
        if listing_type:
            filters.append(listings_table.c.type == listing_type)
        return self._page(filters, limit=limit, offset=offset)

    def list_visible_listings(self) -> List[Dict[str, Any]]:
        with self.engine.begin() as conn:
            rows = conn.execute(
                select(listings_table).where(self._visible()).order_by(listings_table.c.id)
            ).mappings().all()
        return [dict(row) for row in rows]

    def get_place_details(self, place_id: str) -> Optional[dict]:
        with self.engine.begin() as conn:
            return conn.execute(
                select(listings_table.c.google_place_details)
                .where(
                    listings_table.c.place_id == place_id,
                    listings_table.c.google_place_details.is_not(None),
                )
                .limit(1)
            ).scalar_one_or_none()

    def list_stale_listings(self, before: datetime, *, page_size: int = STALE_PAGE_SIZE) -> List[Dict[str, Any]]:
        """Visible listings that started before ``before``, read page by page."""
        before = _ensure_utc(before)
        stale: List[Dict[str, Any]] = []
        page = 0
        while True:
            with self.engine.begin() as conn:
                batch = conn.execute(
                    select(
                        listings_table.c.id,
                        listings_table.c.title,
                        listings_table.c.type,
                        listings_table.c.start_date,
                        listings_table.c.organizer,
                    )
                    .where(listings_table.c.start_date < before, self._visible())
                    .order_by(listings_table.c.start_date.desc(), listings_table.c.id)
                    .limit(page_size)
                    .offset(page * page_size)
                ).mappings().all()
            if not batch:
                break
            stale.extend(dict(row) for row in batch)
            if len(batch) < page_size:
                break
            page += 1
        return stale

    def hide_listings(self, ids: Sequence[str], *, batch_size: int = HIDE_BATCH_SIZE) -> Tuple[int, int]:
        hidden = 0
        errors = 0
        now = datetime.now(timezone.utc)
        for start in range(0, len(ids), batch_size):
            batch = list(ids[start : start + batch_size])
            try:
                with self.engine.begin() as conn:
                    conn.execute(
                        update(listings_table)
                        .where(listings_table.c.id.in_(batch))
                        .values(hidden=True, updated_at=now)
                    )
            except SQLAlchemyError as exc:
                logger.warning("Failed to hide batch of %d listings: %s", len(batch), exc)
                errors += len(batch)
                continue
            hidden += len(batch)
        return hidden, errors

    def list_past_listings_without_coordinates(self, before: datetime) -> List[Dict[str, Any]]:
        """Listings that started before ``before`` and have no usable location."""
        before = _ensure_utc(before)
        with self.engine.begin() as conn:
            rows = conn.execute(
                select(
                    listings_table.c.id,
                    listings_table.c.external_id,
                    listings_table.c.title,
                    listings_table.c.start_date,
                    listings_table.c.city,
                    listings_table.c.location_name,
                    listings_table.c.organizer,
                )
                .where(
                    listings_table.c.start_date < before,
                    or_(listings_table.c.latitude.is_(None), listings_table.c.longitude.is_(None)),
                )
                .order_by(listings_table.c.start_date, listings_table.c.id)
            ).mappings().all()
        return [dict(row) for row in rows]

    def delete_listings(self, ids: Sequence[str], *, batch_size: int = DELETE_BATCH_SIZE) -> Tuple[int, int]:
        deleted = 0
        errors = 0
        for start in range(0, len(ids), batch_size):
            batch = list(ids[start : start + batch_size])
            try:
                with self.engine.begin() as conn:
                    result = conn.execute(delete(listings_table).where(listings_table.c.id.in_(batch)))
            except SQLAlchemyError as exc:
                logger.warning("Failed to delete batch of %d listings: %s", len(batch), exc)
                errors += len(batch)
                continue
            deleted += result.rowcount
        return deleted, errors

    def list_for_place_refresh(
        self,
        *,
        mode: str = REFRESH_MISSING,
        place_id: Optional[str] = None,
        limit: int = 100,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        if mode not in REFRESH_MODES:
            raise ValueError(f"Unknown refresh mode '{mode}'")
        now = _ensure_utc(now or datetime.now(timezone.utc))
        filters = [listings_table.c.place_id.is_not(None)]
        if place_id:
            filters.append(listings_table.c.place_id == place_id)
        elif mode == REFRESH_STALE:
            details_at = listings_table.c.place_details_updated_at
            hours_at = func.coalesce(listings_table.c.place_hours_updated_at, details_at)
            filters.append(
                or_(
                    details_at.is_(None),
                    details_at < now - PLACE_DETAILS_TTL,
                    hours_at < now - PLACE_HOURS_TTL,
                )
            )
        elif mode == REFRESH_MISSING:
            filters.append(listings_table.c.google_place_details.is_(None))
        with self.engine.begin() as conn:
            rows = conn.execute(
                select(listings_table).where(*filters).order_by(listings_table.c.id).limit(limit)
            ).mappings().all()
        return [dict(row) for row in rows]

    def update_place_details(
        self,
        listing_id: str,
        details: dict,
        *,
        hours_only: bool = False,
        place_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        now = _ensure_utc(now or datetime.now(timezone.utc))
        values: Dict[str, Any] = {
            "google_place_details": details,
            "place_hours_updated_at": now,
            "updated_at": now,
        }
        if not hours_only:
            values["place_details_updated_at"] = now
        if place_type:
            values["place_type"] = place_type
        with self.engine.begin() as conn:
            conn.execute(update(listings_table).where(listings_table.c.id == listing_id).values(**values))

    def list_missing_images(self, *, limit: int = 50) -> List[Dict[str, Any]]:
        with self.engine.begin() as conn:
            rows = conn.execute(
                select(
                    listings_table.c.id,
                    listings_table.c.title,
                    listings_table.c.place_type,
                    listings_table.c.tags,
                )
                .where(listings_table.c.image.is_(None), self._visible())
                .order_by(listings_table.c.id)
                .limit(limit)
            ).mappings().all()
        return [dict(row) for row in rows]

    def list_used_photo_ids(self) -> Set[str]:
        with self.engine.begin() as conn:
            return set(
                conn.execute(
                    select(listings_table.c.unsplash_photo_id).where(listings_table.c.unsplash_photo_id.is_not(None))
                ).scalars()
            )

    def update_image(self, listing_id: str, image_url: str, photo_id: Optional[str] = None) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                update(listings_table)
                .where(listings_table.c.id == listing_id)
                .values(image=image_url, unsplash_photo_id=photo_id, updated_at=datetime.now(timezone.utc))
            )

    def list_missing_coordinates(self, *, limit: int = 250) -> List[Dict[str, Any]]:
        with self.engine.begin() as conn:
            rows = conn.execute(
                select(
                    listings_table.c.id,
                    listings_table.c.title,
                    listings_table.c.street,
                    listings_table.c.city,
                    listings_table.c.state,
                    listings_table.c.zip,
                    listings_table.c.location_name,
                )
                .where(or_(listings_table.c.latitude.is_(None), listings_table.c.longitude.is_(None)))
                .order_by(listings_table.c.id)
                .limit(limit)
            ).mappings().all()
        return [dict(row) for row in rows]

    def update_coordinates(self, listing_id: str, latitude: float, longitude: float) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                update(listings_table)
                .where(listings_table.c.id == listing_id)
                .values(latitude=latitude, longitude=longitude, updated_at=datetime.now(timezone.utc))
            )

    def _page(self, filters: list, *, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        with self.engine.begin() as conn:
            count = conn.execute(select(func.count()).select_from(listings_table).where(*filters)).scalar_one()
            rows = conn.execute(
                select(listings_table)
                .where(*filters)
                .order_by(
                    listings_table.c.recommended.desc(),
                    listings_table.c.start_date.is_(None),
                    listings_table.c.start_date.asc(),
                    listings_table.c.id,
                )
                .limit(limit)
                .offset(offset)
            ).mappings().all()
        return [dict(row) for row in rows], count

    @staticmethod
    def _visible():
        return or_(listings_table.c.hidden.is_(None), listings_table.c.hidden.is_(False))
