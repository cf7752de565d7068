from __future__ import annotations

from outta.infra.cache.read_through import build_cache_key, home_cache_key, listings_cache_key, search_cache_key


def test_key_ignores_parameter_order():
    assert build_cache_key("listings", {"a": 1, "b": 2}) == build_cache_key("listings", {"b": 2, "a": 1})


def test_key_format():
    assert listings_cache_key({"type": "Event", "limit": 15, "offset": 0}) == "listings:limit:15|offset:0|type:Event"


def test_none_values_are_dropped():
    assert listings_cache_key({"city": None, "limit": 15}) == listings_cache_key({"limit": 15})


def test_different_values_give_different_keys():
    assert home_cache_key({"today": "2026-03-10"}) != home_cache_key({"today": "2026-03-11"})


def test_search_key():
    assert search_cache_key("zoo") == "search:all:zoo:15:0"
    assert search_cache_key("zoo", "Camp", 30, 15) == "search:Camp:zoo:30:15"
