"""
Bernoulli Naive Bayes recommender.

The model is a binary liked / not-liked classifier fitted from scratch for
one user: restaurants in the user's positive set are the liked class and
every other restaurant is treated as not liked. All probabilities use
Laplace (add-one) smoothing and are kept in log space.

Fitted quantities, with N restaurants, P liked, Np = N - P and vocabulary
size V:

    P(liked)               = (P + 1) / (N + 2)
    P(not liked)           = max(1 - P(liked), PRIOR_FLOOR)
    P(feature | class)     = (count + 1) / (class size + V)
    P(unseen | class)      = 1 / (class size + V)

Scoring sums the log prior and the log conditionals of a restaurant's
features for each class and converts the two scores to a posterior with a
max-shifted softmax.
"""
from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

import numpy as np

from ..catalog.records import Restaurant
from .errors import EmptyCatalogError
from .features import FeatureCache, features_for

SMOOTHING = 1
PRIOR_FLOOR = 1e-9


@dataclass(frozen=True)
class NaiveBayesModel:
    log_prior_liked: float
    log_prior_not_liked: float
    log_conditional_liked: Mapping[str, float]
    log_conditional_not_liked: Mapping[str, float]
    default_log_liked: float
    default_log_not_liked: float
    positive_ids: frozenset[str]
    vocabulary: frozenset[str]
    catalog_size: int

    @property
    def liked_count(self) -> int:
        return len(self.positive_ids)

    @property
    def not_liked_count(self) -> int:
        return max(self.catalog_size - self.liked_count, 0)

    def log_likelihoods(self, features: Iterable[str]) -> tuple[float, float]:
        """Return ``(log_liked, log_not_liked)`` for a feature set, priors included."""
        log_liked = self.log_prior_liked
        log_not_liked = self.log_prior_not_liked
        for feature in features:
            log_liked += self.log_conditional_liked.get(feature, self.default_log_liked)
            log_not_liked += self.log_conditional_not_liked.get(feature, self.default_log_not_liked)
        return log_liked, log_not_liked

    def log_odds(self, feature: str) -> float:
        return self.log_conditional_liked.get(
            feature, self.default_log_liked
        ) - self.log_conditional_not_liked.get(feature, self.default_log_not_liked)


@dataclass(frozen=True)
class ScoreBreakdown:
    probability: float
    log_liked: float
    log_not_liked: float
    features: frozenset[str]


@dataclass(frozen=True)
class ScoredRestaurant:
    restaurant: Restaurant
    probability: float
    details: ScoreBreakdown | None = None


def _log_conditionals(counts: Counter[str], denominator: int, vocabulary: Iterable[str]) -> Mapping[str, float]:
    return MappingProxyType({
        feature: math.log((counts[feature] + SMOOTHING) / denominator)
        for feature in vocabulary
    })


def fit(
    restaurants: Sequence[Restaurant],
    positive_ids: Iterable[str],
    feature_cache: FeatureCache | None = None,
) -> NaiveBayesModel:
    """Fit a liked / not-liked model over the whole catalog."""
    restaurants = list(restaurants)
    if not restaurants:
        raise EmptyCatalogError("Cannot fit a recommendation model without any restaurants")

    positives = frozenset(positive_ids)
    liked_counts: Counter[str] = Counter()
    not_liked_counts: Counter[str] = Counter()
    vocabulary: set[str] = set()
    for restaurant in restaurants:
        features = features_for(restaurant, feature_cache)
        vocabulary.update(features)
        target = liked_counts if restaurant.id in positives else not_liked_counts
        target.update(features)

    total = len(restaurants)
    liked = len(positives)
    not_liked = max(total - liked, 0)
    vocabulary_size = max(len(vocabulary), 1)

    prior_liked = (liked + SMOOTHING) / (total + 2 * SMOOTHING)
    prior_not_liked = max(1 - prior_liked, PRIOR_FLOOR)

    liked_denominator = liked + SMOOTHING * vocabulary_size
    not_liked_denominator = not_liked + SMOOTHING * vocabulary_size

    return NaiveBayesModel(
        log_prior_liked=math.log(prior_liked),
        log_prior_not_liked=math.log(prior_not_liked),
        log_conditional_liked=_log_conditionals(liked_counts, liked_denominator, vocabulary),
        log_conditional_not_liked=_log_conditionals(not_liked_counts, not_liked_denominator, vocabulary),
        default_log_liked=math.log(SMOOTHING / liked_denominator),
        default_log_not_liked=math.log(SMOOTHING / not_liked_denominator),
        positive_ids=positives,
        vocabulary=frozenset(vocabulary),
        catalog_size=total,
    )


def _posterior(log_liked: float, log_not_liked: float) -> float:
    shift = max(log_liked, log_not_liked)
    liked = math.exp(log_liked - shift)
    not_liked = math.exp(log_not_liked - shift)
    return liked / (liked + not_liked)


def score_details(
    model: NaiveBayesModel,
    restaurant: Restaurant,
    feature_cache: FeatureCache | None = None,
) -> ScoreBreakdown:
    features = features_for(restaurant, feature_cache)
    log_liked, log_not_liked = model.log_likelihoods(features)
    return ScoreBreakdown(
        probability=_posterior(log_liked, log_not_liked),
        log_liked=log_liked,
        log_not_liked=log_not_liked,
        features=features,
    )


def score(
    model: NaiveBayesModel,
    restaurant: Restaurant,
    feature_cache: FeatureCache | None = None,
) -> float:
    """Posterior probability in [0, 1] that the user likes ``restaurant``."""
    return score_details(model, restaurant, feature_cache).probability


def recommend(
    model: NaiveBayesModel,
    candidates: Iterable[Restaurant],
    feature_cache: FeatureCache | None = None,
    include_scores: bool = False,
) -> list[ScoredRestaurant]:
    """
    Rank every candidate the user has not already liked.

    Results are sorted by descending probability; equal probabilities keep
    their input order.
    """
    pool = [r for r in candidates if r.id not in model.positive_ids]
    if not pool:
        return []

    breakdowns = [score_details(model, r, feature_cache) for r in pool]
    probabilities = np.array([b.probability for b in breakdowns])
    order = np.argsort(-probabilities, kind="stable")

    return [
        ScoredRestaurant(
            restaurant=pool[i],
            probability=breakdowns[i].probability,
            details=breakdowns[i] if include_scores else None,
        )
        for i in order
    ]


def top_features(model: NaiveBayesModel, limit: int = 10) -> list[tuple[str, float]]:
    """Vocabulary features most indicative of the liked class, by log-odds."""
    ranked = sorted(model.vocabulary, key=lambda f: (-model.log_odds(f), f))
    return [(feature, model.log_odds(feature)) for feature in ranked[:limit]]
