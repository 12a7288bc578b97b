from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..catalog.assembler import Catalog
from ..catalog.records import Foodlist, Restaurant
from .features import FeatureCache, build_feature_cache
from .labels import positive_restaurant_ids


@dataclass(frozen=True)
class RecommendationContext:
    """
    Everything one recommendation request computes before fitting.

    Built fresh per request and never shared between users, so the feature
    cache and label set are never visible to another request.
    """

    user_id: str
    catalog: Catalog
    feature_cache: FeatureCache
    vocabulary: frozenset[str]
    positive_ids: frozenset[str]

    @classmethod
    def build(
        cls,
        user_id: str,
        catalog: Catalog,
        lists: Iterable[Foodlist | Mapping[str, Any]],
    ) -> RecommendationContext:
        feature_cache, vocabulary = build_feature_cache(catalog.restaurants.values())
        positives = positive_restaurant_ids(user_id, lists, catalog.item_index)
        return cls(
            user_id=user_id,
            catalog=catalog,
            feature_cache=feature_cache,
            vocabulary=vocabulary,
            positive_ids=frozenset(positives),
        )

    @property
    def restaurants(self) -> list[Restaurant]:
        return list(self.catalog.restaurants.values())
