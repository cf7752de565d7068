from __future__ import annotations

from datetime import datetime, timedelta, timezone

from outta.domain.filters import (
    filter_by_place_type,
    filter_events,
    get_event_count,
    get_place_type_counts,
    is_current,
    local_today,
)
from outta.domain.geo import add_distance
from outta.tests.factories import SACRAMENTO, SF, TODAY, local_dt, make_listing

YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


def test_local_today_uses_local_calendar_day():
    # 06:00 UTC on the 10th is still the evening of the 9th in California
    assert local_today(datetime(2026, 3, 10, 6, 0, tzinfo=timezone.utc)) == YESTERDAY
    assert local_today(datetime(2026, 3, 10, 17, 0, tzinfo=timezone.utc)) == TODAY


def test_filter_events_keeps_today_and_drops_yesterday():
    listings = [
        make_listing("today", start_date=local_dt(TODAY, 0, 30), latitude=37.77, longitude=-122.4),
        make_listing("yesterday", start_date=local_dt(YESTERDAY, 23, 59), latitude=37.77, longitude=-122.4),
    ]

    events = filter_events(add_distance(listings, 37.77, -122.4), 50, today=TODAY)

    assert [event.id for event in events] == ["today"]
    assert events[0].distance == 0.0


def test_same_day_events_stay_visible_regardless_of_time():
    early = make_listing("early", start_date=local_dt(TODAY, 0, 0))
    late = make_listing("late", start_date=local_dt(TODAY, 23, 30))
    assert {event.id for event in filter_events([late, early], today=TODAY)} == {"early", "late"}


def test_events_before_local_midnight_are_excluded():
    just_before = make_listing("before", start_date=local_dt(TODAY, 0, 0) - timedelta(minutes=1))
    assert filter_events([just_before], today=TODAY) == []


def test_filter_events_requires_event_type_coordinates_and_date():
    listings = [
        make_listing("activity", type="Activity"),
        make_listing("no-lat", latitude=None),
        make_listing("no-lng", longitude=None),
        make_listing("undated", start_date=None),
        make_listing("ok"),
    ]
    assert [event.id for event in filter_events(listings, today=TODAY)] == ["ok"]


def test_filter_events_respects_max_distance():
    listings = add_distance(
        [
            make_listing("sf"),
            make_listing("sacramento", latitude=SACRAMENTO[0], longitude=SACRAMENTO[1]),
        ],
        *SF,
    )
    assert [event.id for event in filter_events(listings, 50, today=TODAY)] == ["sf"]
    assert len(filter_events(listings, 100, today=TODAY)) == 2


def test_filter_events_treats_unknown_distance_as_zero():
    listing = make_listing("far-away-but-unknown", latitude=SACRAMENTO[0], longitude=SACRAMENTO[1])
    assert filter_events([listing], 1, today=TODAY) == [listing]


def test_filter_events_sorted_by_start_then_distance():
    start = local_dt(TOMORROW, 10)
    listings = [
        make_listing("later", start_date=local_dt(TOMORROW, 15)).with_distance(1.0),
        make_listing("same-far", start_date=start).with_distance(9.5),
        make_listing("same-near", start_date=start).with_distance(2.0),
        make_listing("today", start_date=local_dt(TODAY, 20)).with_distance(30.0),
    ]

    events = filter_events(listings, today=TODAY)

    assert [event.id for event in events] == ["today", "same-near", "same-far", "later"]
    for previous, current in zip(events, events[1:]):
        assert previous.start_date <= current.start_date
        if previous.start_date == current.start_date:
            assert previous.distance <= current.distance


def test_filter_events_compares_instants_across_offsets():
    utc_start = make_listing("utc", start_date=datetime(2026, 3, 11, 16, 0, tzinfo=timezone.utc))
    local_start = make_listing("local", start_date=local_dt(TOMORROW, 8))
    # 16:00 UTC is 09:00 local
    assert [event.id for event in filter_events([utc_start, local_start], today=TODAY)] == ["local", "utc"]


def test_filter_by_place_type_is_case_insensitive_and_sorted_by_distance():
    listings = [
        make_listing("far", type="Activity", place_type="Museum", start_date=None).with_distance(12.0),
        make_listing("near", type="Activity", place_type="museum", start_date=None).with_distance(3.0),
        make_listing("park", type="Activity", place_type="Park", start_date=None).with_distance(1.0),
    ]
    assert [listing.id for listing in filter_by_place_type(listings, "MUSEUM", today=TODAY)] == ["near", "far"]


def test_filter_by_place_type_never_returns_listings_without_coordinates():
    listings = [
        make_listing("no-lat", place_type="Park", latitude=None),
        make_listing("no-lng", place_type="Park", longitude=None),
        make_listing("ok", place_type="Park"),
    ]
    results = filter_by_place_type(listings, "park", today=TODAY)
    assert [listing.id for listing in results] == ["ok"]
    assert all(listing.has_coordinates for listing in results)


def test_filter_by_place_type_drops_past_dated_listings_but_keeps_undated():
    listings = [
        make_listing("past", place_type="Park", start_date=local_dt(YESTERDAY)),
        make_listing("standing", type="Activity", place_type="Park", start_date=None),
        make_listing("upcoming", place_type="Park", start_date=local_dt(TOMORROW)),
    ]
    assert {listing.id for listing in filter_by_place_type(listings, "Park", today=TODAY)} == {"standing", "upcoming"}


def test_place_type_counts_descending_with_name_tiebreak():
    listings = [
        make_listing("m1", place_type="Museum", start_date=None),
        make_listing("m2", place_type="Museum", start_date=None),
        make_listing("p1", place_type="Park", start_date=None),
        make_listing("l1", place_type="Library", start_date=None),
    ]
    assert get_place_type_counts(listings, today=TODAY) == [
        {"type": "Museum", "count": 2},
        {"type": "Library", "count": 1},
        {"type": "Park", "count": 1},
    ]


def test_place_type_counts_sum_matches_inclusion_predicate():
    listings = [
        make_listing("ok", place_type="Park"),
        make_listing("undated", place_type="Park", start_date=None),
        make_listing("past", place_type="Park", start_date=local_dt(YESTERDAY)),
        make_listing("untyped", place_type=None),
        make_listing("nowhere", place_type="Museum", latitude=None),
    ]
    counts = get_place_type_counts(listings, today=TODAY)
    included = [
        listing
        for listing in listings
        if listing.has_coordinates and listing.place_type and is_current(listing, TODAY)
    ]
    assert sum(entry["count"] for entry in counts) == len(included) == 2


def test_event_count_matches_filter_events():
    listings = add_distance(
        [
            make_listing("a"),
            make_listing("b", start_date=local_dt(TOMORROW)),
            make_listing("past", start_date=local_dt(YESTERDAY)),
            make_listing("far", latitude=SACRAMENTO[0], longitude=SACRAMENTO[1]),
            make_listing("activity", type="Activity"),
        ],
        *SF,
    )
    assert get_event_count(listings, today=TODAY) == len(filter_events(listings, today=TODAY)) == 2


def test_place_type_counts_merge_spellings_like_the_filter():
    listings = [
        make_listing("m1", place_type="Museum", start_date=None),
        make_listing("m2", place_type="museum", start_date=None),
        make_listing("m3", place_type=" MUSEUM ", start_date=None),
        make_listing("p1", place_type="Park", start_date=None),
    ]

    counts = get_place_type_counts(listings, today=TODAY)

    assert counts == [{"type": "Museum", "count": 3}, {"type": "Park", "count": 1}]
    assert counts[0]["count"] == len(filter_by_place_type(listings, "museum", today=TODAY))
