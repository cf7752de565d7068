from __future__ import annotations

from datetime import datetime, timezone

from outta.domain.models import Listing, PlaceDetails, Source


def test_from_row_parses_loose_values():
    listing = Listing.from_row(
        {
            "id": 42,
            "title": "Storytime",
            "type": "Event",
            "latitude": "37.77",
            "longitude": "not-a-number",
            "zip": 94110,
            "start_date": "2026-03-10T18:00:00Z",
            "recommended": 1,
            "hidden": None,
        }
    )
    assert listing.id == "42"
    assert listing.latitude == 37.77
    assert listing.longitude is None
    assert not listing.has_coordinates
    assert listing.zip == "94110"
    assert listing.start_date == datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc)
    assert listing.recommended is True
    assert listing.hidden is False
    assert listing.is_event


def test_from_row_treats_naive_and_bad_timestamps():
    listing = Listing.from_row(
        {
            "id": "a",
            "start_date": "2026-03-10T18:00:00",
            "place_details_updated_at": "yesterday",
            "latitude": "nan",
        }
    )
    assert listing.start_date.tzinfo == timezone.utc
    assert listing.place_details_updated_at is None
    assert listing.latitude is None
    assert listing.title == ""


def test_to_dict_omits_unknown_distance():
    listing = Listing(id="a", title="Park day", type="Activity")
    assert "distance" not in listing.to_dict()
    payload = listing.with_distance(3.2).to_dict()
    assert payload["distance"] == 3.2
    assert payload["start_date"] is None


def test_to_dict_serializes_datetimes():
    start = datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc)
    payload = Listing(id="a", title="Fair", type="Event", start_date=start).to_dict()
    assert payload["start_date"] == "2026-03-10T18:00:00+00:00"


def test_distance_does_not_affect_equality():
    listing = Listing(id="a", title="Fair", type="Event")
    assert listing.with_distance(1.0) == listing


def test_source_from_row():
    source = Source.from_row({"id": 7, "name": "SF Library", "url": "https://sfpl.org", "logo": "", "featured_source": 1})
    assert source.to_dict() == {
        "id": "7",
        "name": "SF Library",
        "url": "https://sfpl.org",
        "logo": None,
        "featured_source": True,
    }


def test_place_details_uses_camel_case_keys():
    blob = {"photos": [{"url": "x"}], "openingHours": {"isOpen": True}, "rating": 4.1, "userRatingsTotal": 12}
    details = PlaceDetails.from_dict(blob)
    assert details.user_ratings_total == 12
    assert details.reviews == []
    assert details.to_dict() == {**blob, "reviews": []}
