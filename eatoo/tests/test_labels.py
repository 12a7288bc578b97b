from __future__ import annotations

from eatoo.catalog.records import Foodlist
from eatoo.recommendations.labels import positive_restaurant_ids

ITEM_INDEX = {"i1": "r1", "i2": "r1", "i3": "r2", "i4": "r3"}


def test_maps_list_items_to_restaurants():
    lists = [{"id": "fl-1", "owner_id": "u1", "item_ids": ["i1", "i2", "i3"]}]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == {"r1", "r2"}


def test_unions_all_lists_owned_by_user():
    lists = [
        {"id": "fl-1", "ownerId": "u1", "itemIds": ["i1"]},
        {"id": "fl-2", "ownerId": "u1", "itemIds": ["i4"]},
    ]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == {"r1", "r3"}


def test_skips_lists_owned_by_someone_else():
    lists = [
        {"id": "fl-1", "owner_id": "u1", "item_ids": ["i1"]},
        {"id": "fl-2", "owner_id": "u2", "item_ids": ["i3"]},
    ]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == {"r1"}


def test_lists_without_owner_are_trusted():
    assert positive_restaurant_ids("u1", [{"item_ids": ["i3"]}], ITEM_INDEX) == {"r2"}


def test_unresolvable_items_are_skipped():
    lists = [{"owner_id": "u1", "item_ids": ["i-unknown", "i3", None, ""]}]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == {"r2"}


def test_embedded_item_records_are_resolved():
    lists = [{"owner_id": "u1", "items": [{"$id": "i4", "name": "Tiramisu"}, "i1"]}]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == {"r1", "r3"}


def test_accepts_foodlist_entities():
    lists = [Foodlist(id="fl-1", owner_id="u1", item_ids=frozenset({"i2"}))]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == {"r1"}


def test_no_lists_or_no_user_means_no_labels():
    assert positive_restaurant_ids("u1", [], ITEM_INDEX) == set()
    assert positive_restaurant_ids(None, [{"item_ids": ["i1"]}], ITEM_INDEX) == set()


def test_null_owner_id_falls_back_to_owner_id_spelling():
    lists = [{"owner_id": None, "ownerId": "u2", "item_ids": ["i1"]}]
    assert positive_restaurant_ids("u1", lists, ITEM_INDEX) == set()
    assert positive_restaurant_ids("u2", lists, ITEM_INDEX) == {"r1"}
