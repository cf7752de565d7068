from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from outta.api.deps import get_engine
from outta.api.main import create_app
from outta.infra.cache.read_through import ReadThroughCache
from outta.infra.cache.store import InMemoryStore
from outta.tests.factories import NOW_UTC

CRON_SECRET = "test-cron-secret"


class StubGeocoder:
    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    def geocode(self, address):
        self.calls.append(address)
        result = self.results.get(address)
        if isinstance(result, Exception):
            raise result
        return result


class StubImageClient:
    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    def search_photos(self, query, per_page=10):
        self.calls.append(query)
        result = self.results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture()
def cache():
    return ReadThroughCache(InMemoryStore(), ttl_seconds=300)


@pytest.fixture()
def geocoder():
    return StubGeocoder()


@pytest.fixture()
def image_client():
    return StubImageClient()


@pytest.fixture()
def api_client(engine, cache, geocoder, image_client, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", CRON_SECRET)
    app = create_app(
        engine=engine, cache=cache, clock=lambda: NOW_UTC, geocoder=geocoder, image_client=image_client
    )
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def cron_headers():
    return {"Authorization": f"Bearer {CRON_SECRET}"}
