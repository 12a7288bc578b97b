from __future__ import annotations


class RecommendationError(Exception):
    """Base class for failures surfaced by the recommendation pipeline."""


class EmptyCatalogError(RecommendationError):
    """Raised when a model is fitted against a catalog with no restaurants."""
