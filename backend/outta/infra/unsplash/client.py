from __future__ import annotations

import os
from typing import List, Optional

import httpx


class UnsplashClient:
    SEARCH_URL = "https://api.unsplash.com/search/photos"
    PER_PAGE = 10

    def __init__(
        self,
        access_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.access_key = access_key or os.getenv("UNSPLASH_ACCESS_KEY")
        if not self.access_key:
            raise RuntimeError("UNSPLASH_ACCESS_KEY is required for UnsplashClient")
        self.timeout = timeout
        self.transport = transport

    def search_photos(self, query: str, per_page: int = PER_PAGE) -> List[dict]:
        """Landscape, family-safe photos for ``query`` as ``{id, url, photographer}``."""
        params = {
            "query": query,
            "per_page": per_page,
            "orientation": "landscape",
            "content_filter": "high",
        }
        headers = {"Authorization": f"Client-ID {self.access_key}"}
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            resp = client.get(self.SEARCH_URL, params=params, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        return [
            {
                "id": photo["id"],
                "url": (photo.get("urls") or {}).get("regular"),
                "photographer": (photo.get("user") or {}).get("name"),
            }
            for photo in data.get("results") or []
            if photo.get("id")
        ]
