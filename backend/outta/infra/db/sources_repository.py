from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.engine import Engine

from .tables import sources_table


class SourcesRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def list_sources(self, *, featured_only: bool = False) -> List[Dict[str, Any]]:
        stmt = select(sources_table).order_by(sources_table.c.name)
        if featured_only:
            stmt = stmt.where(sources_table.c.featured_source.is_(True))
        with self.engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]
