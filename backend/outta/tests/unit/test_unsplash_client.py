from __future__ import annotations

import httpx
import pytest

from outta.infra.unsplash.client import UnsplashClient

SEARCH_RESULT = {
    "total": 2,
    "results": [
        {"id": "abc", "urls": {"regular": "https://images.unsplash.com/abc"}, "user": {"name": "Mia"}},
        {"id": "def", "urls": {"regular": "https://images.unsplash.com/def"}, "user": {}},
        {"urls": {"regular": "https://images.unsplash.com/anon"}},
    ],
}


def test_unsplash_client_requires_key(monkeypatch):
    monkeypatch.delenv("UNSPLASH_ACCESS_KEY", raising=False)
    with pytest.raises(RuntimeError):
        UnsplashClient()


def test_search_photos_sends_query_and_parses_results():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SEARCH_RESULT)

    client = UnsplashClient(access_key="key", transport=httpx.MockTransport(handler))
    photos = client.search_photos("kids yoga exercise")

    assert photos == [
        {"id": "abc", "url": "https://images.unsplash.com/abc", "photographer": "Mia"},
        {"id": "def", "url": "https://images.unsplash.com/def", "photographer": None},
    ]
    request = seen[0]
    assert request.headers["Authorization"] == "Client-ID key"
    assert request.url.params["query"] == "kids yoga exercise"
    assert request.url.params["per_page"] == "10"
    assert request.url.params["orientation"] == "landscape"
    assert request.url.params["content_filter"] == "high"


def test_search_photos_raises_on_http_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(403, json={"errors": ["Rate Limit Exceeded"]}))
    client = UnsplashClient(access_key="key", transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        client.search_photos("kids activities")
