"""
Recommendation service.

Wires the collaborators (catalog, food lists, identity) to the pure
pipeline: fetch -> assemble -> derive labels -> fit -> score -> rank.
"""
from __future__ import annotations

import logging
import time

from ..analytics.store import record_event
from ..catalog.assembler import Catalog, assemble_catalog
from ..catalog.sources import CATALOG_KINDS, CatalogSource, IdentitySource, ListSource
from .context import RecommendationContext
from .naive_bayes import NaiveBayesModel, ScoredRestaurant, fit, recommend

logger = logging.getLogger(__name__)


class RecommendationService:
    def __init__(self, catalog_source: CatalogSource, list_source: ListSource) -> None:
        self.catalog_source = catalog_source
        self.list_source = list_source

    def load_catalog(self) -> Catalog:
        restaurants, menus, items = (self.catalog_source.list_all(kind) for kind in CATALOG_KINDS)
        catalog = assemble_catalog(restaurants, menus, items)

        report = catalog.report
        if report.has_degradations:
            logger.warning(
                "Catalog assembled with degraded records: %d restaurants dropped, "
                "%d menus dropped, %d items dropped, %d items uncategorized",
                report.dropped_restaurants,
                report.dropped_menus,
                report.dropped_items,
                report.orphaned_items,
            )
        return catalog

    def build_context(self, user_id: str) -> RecommendationContext:
        catalog = self.load_catalog()
        lists = self.list_source.list_lists_for_user(user_id)
        context = RecommendationContext.build(user_id, catalog, lists)
        logger.debug(
            "Built context for user %s: %d restaurants, %d liked, %d features",
            user_id, len(catalog), len(context.positive_ids), len(context.vocabulary),
        )
        return context

    def build_model_for_user(self, user_id: str) -> NaiveBayesModel:
        """Fit the user's model without ranking, for inspection or batch scoring."""
        context = self.build_context(user_id)
        return fit(context.restaurants, context.positive_ids, context.feature_cache)

    def get_recommendations_for_user(
        self, user_id: str, include_scores: bool = False,
    ) -> list[ScoredRestaurant]:
        start_time = time.time()

        context = self.build_context(user_id)
        model = fit(context.restaurants, context.positive_ids, context.feature_cache)
        results = recommend(
            model, context.restaurants, context.feature_cache, include_scores=include_scores,
        )

        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        record_event("recommendation", {
            "user_id": user_id,
            "catalog_size": len(context.catalog),
            "positive_count": len(context.positive_ids),
            "results_returned": len(results),
            "top_restaurant_id": results[0].restaurant.id if results else None,
            "response_time_ms": elapsed_ms,
        })
        logger.info(
            "Ranked %d restaurants for user %s in %.1f ms", len(results), user_id, elapsed_ms,
        )
        return results

    def get_recommendations_for_current_user(
        self, identity: IdentitySource, include_scores: bool = False,
    ) -> list[ScoredRestaurant]:
        """Recommend for the signed-in user; no user means no personalization, not an error."""
        user_id = identity.current_user_id()
        if not user_id:
            logger.info("No current user resolved, returning no recommendations")
            return []
        return self.get_recommendations_for_user(user_id, include_scores=include_scores)
