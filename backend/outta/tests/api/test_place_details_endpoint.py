from __future__ import annotations

from outta.tests.factories import listing_row, seed_listings, seed_sources

DETAILS = {
    "photos": [{"url": "https://example.com/p.jpg", "width": 800, "height": 600}],
    "openingHours": {"isOpen": True, "weekdayText": ["Monday: 9AM-5PM"]},
    "rating": 4.7,
    "userRatingsTotal": 88,
    "reviews": [],
}


def test_place_details_requires_place_id(api_client):
    response = api_client.get("/api/place-details")
    assert response.status_code == 400
    assert response.json()["detail"] == "place_id is required"


def test_place_details_returns_cached_blob(api_client, engine):
    seed_listings(
        engine,
        listing_row("a", place_id="place-1", google_place_details=None),
        listing_row("b", place_id="place-1", google_place_details=DETAILS),
    )

    response = api_client.get("/api/place-details", params={"place_id": "place-1"})

    assert response.status_code == 200
    assert response.json() == DETAILS


def test_place_details_missing_is_404(api_client, engine):
    seed_listings(engine, listing_row("a", place_id="place-2"))

    response = api_client.get("/api/place-details", params={"place_id": "place-2"})

    assert response.status_code == 404
    assert response.json()["detail"] == "No cached data available"


def test_sources_sorted_and_filterable(api_client, engine):
    seed_sources(
        engine,
        {"id": "s2", "name": "Oakland Zoo", "logo": None, "url": "https://oaklandzoo.org", "featured_source": False},
        {"id": "s1", "name": "Exploratorium", "logo": "https://x/logo.png", "url": "https://exploratorium.edu", "featured_source": True},
    )

    everything = api_client.get("/api/sources").json()
    featured = api_client.get("/api/sources", params={"featured": "true"}).json()

    assert [source["name"] for source in everything] == ["Exploratorium", "Oakland Zoo"]
    assert featured == [
        {
            "id": "s1",
            "name": "Exploratorium",
            "url": "https://exploratorium.edu",
            "logo": "https://x/logo.png",
            "featured_source": True,
        }
    ]
