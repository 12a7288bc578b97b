from __future__ import annotations

from eatoo.catalog.assembler import assemble_catalog
from eatoo.catalog.records import Item, Menu, Restaurant
from eatoo.recommendations.features import build_feature_cache, extract_features, features_for


def _restaurant(tags_order=("spicy", "popular"), cuisines=("Japanese",)):
    catalog = assemble_catalog(
        [{"id": "r1", "name": "Sakura", "cuisines": list(cuisines), "ambience": ["Casual Drinking"]}],
        [{"id": "m1", "name": "Lunch", "restaurant_id": "r1"}],
        [
            {"id": "i1", "restaurant_id": "r1", "menu_id": "m1", "type": "Meal",
             "cuisine": "japanese", "tags": list(tags_order)},
            {"id": "i2", "restaurant_id": "r1", "menu_id": "m1", "type": "meal",
             "cuisine": "Western", "tags": ["popular"]},
            {"id": "i3", "restaurant_id": "r1", "type": "drink", "tags": []},
        ],
    )
    return catalog.restaurants["r1"]


def test_extracts_all_feature_kinds():
    assert extract_features(_restaurant()) == {
        "cuisine:japanese",
        "ambience:casual drinking",
        "tag:spicy",
        "tag:popular",
        "type:meal",
        "type:drink",
        "itemCuisine:japanese",
        "itemCuisine:western",
    }


def test_features_are_lowercased_and_deduplicated():
    features = extract_features(_restaurant())
    assert "type:meal" in features
    assert "type:Meal" not in features
    assert sum(1 for f in features if f.startswith("type:")) == 2


def test_uncategorized_items_contribute_features():
    assert "type:drink" in extract_features(_restaurant())


def test_feature_sets_ignore_attribute_order():
    first = extract_features(_restaurant(tags_order=("spicy", "popular"), cuisines=("Japanese", "Ramen")))
    second = extract_features(_restaurant(tags_order=("popular", "spicy"), cuisines=("Ramen", "Japanese")))
    assert first == second


def test_missing_attributes_emit_nothing():
    bare = Restaurant(id="r0", name="Empty")
    assert extract_features(bare) == frozenset()

    item = Item(id="i1", name="Plain", restaurant_id="r9", tags=frozenset({"  "}))
    with_blank = Restaurant(id="r9", name="Blank", menus=(Menu(id="m", name="M", restaurant_id="r9", items=(item,)),))
    assert extract_features(with_blank) == frozenset()


def test_build_feature_cache_returns_cache_and_vocabulary():
    sakura = _restaurant()
    pizza = Restaurant(id="r2", name="Pizza", cuisines=frozenset({"italian"}))
    cache, vocabulary = build_feature_cache([sakura, pizza])

    assert cache["r2"] == {"cuisine:italian"}
    assert cache["r1"] == extract_features(sakura)
    assert vocabulary == cache["r1"] | cache["r2"]


def test_features_for_prefers_cache():
    pizza = Restaurant(id="r2", name="Pizza", cuisines=frozenset({"italian"}))
    assert features_for(pizza, {"r2": frozenset({"cuisine:cached"})}) == {"cuisine:cached"}
    assert features_for(pizza, {}) == {"cuisine:italian"}
    assert features_for(pizza) == {"cuisine:italian"}
