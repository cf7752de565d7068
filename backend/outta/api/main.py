from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine

from outta.api.routers import home, listings, maintenance, places
from outta.infra.cache.read_through import build_cache_from_env


def create_app(engine=None, cache=None, clock=None, geocoder=None, image_client=None) -> FastAPI:
    app = FastAPI(title="Outta API", version="0.1.0")
    if engine is None:
        database_url = os.getenv("DATABASE_URL")
        engine = create_engine(database_url, future=True) if database_url else None
    app.state.db_engine = engine
    app.state.cache = cache if cache is not None else build_cache_from_env()
    app.state.clock = clock
    app.state.geocoder = geocoder
    app.state.image_client = image_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(listings.router, prefix="/api")
    app.include_router(home.router, prefix="/api")
    app.include_router(places.router, prefix="/api")
    app.include_router(maintenance.router, prefix="/api")
    return app


app = create_app()
