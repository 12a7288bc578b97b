"""
Feature extraction.

A restaurant is described by a set of ``kind:value`` tokens drawn from its own
cuisine and ambience tags and from every item on its menus. Features are
boolean: a token is either present for a restaurant or not, however many
items carry it. Values are stripped and lower-cased so extraction is
case-insensitive.
"""
from __future__ import annotations

from typing import Any, Iterable

from ..catalog.records import Restaurant

FeatureCache = dict[str, frozenset[str]]


def _add(tokens: set[str], kind: str, value: Any) -> None:
    if value is None:
        return
    text = str(value).strip().lower()
    if text:
        tokens.add(f"{kind}:{text}")


def extract_features(restaurant: Restaurant) -> frozenset[str]:
    tokens: set[str] = set()
    for cuisine in restaurant.cuisines:
        _add(tokens, "cuisine", cuisine)
    for ambience in restaurant.ambience:
        _add(tokens, "ambience", ambience)
    for item in restaurant.items:
        for tag in item.tags:
            _add(tokens, "tag", tag)
        _add(tokens, "type", item.type)
        _add(tokens, "itemCuisine", item.cuisine)
    return frozenset(tokens)


def build_feature_cache(restaurants: Iterable[Restaurant]) -> tuple[FeatureCache, frozenset[str]]:
    """Extract every restaurant's features once; return the cache and the vocabulary."""
    cache: FeatureCache = {}
    vocabulary: set[str] = set()
    for restaurant in restaurants:
        features = extract_features(restaurant)
        cache[restaurant.id] = features
        vocabulary.update(features)
    return cache, frozenset(vocabulary)


def features_for(restaurant: Restaurant, cache: FeatureCache | None = None) -> frozenset[str]:
    if cache is not None:
        cached = cache.get(restaurant.id)
        if cached is not None:
            return cached
    return extract_features(restaurant)
