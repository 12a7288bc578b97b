from __future__ import annotations

from pydantic import BaseModel, Field

from ..catalog.records import Item, MenuSection, OrphanBucket, Restaurant
from .naive_bayes import NaiveBayesModel, ScoredRestaurant, top_features


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str


class ItemOut(BaseModel):
    id: str
    name: str
    type: str | None
    cuisine: str | None
    tags: list[str]
    price: float | None

    @classmethod
    def from_item(cls, item: Item) -> ItemOut:
        return cls(
            id=item.id,
            name=item.name,
            type=item.type,
            cuisine=item.cuisine,
            tags=sorted(item.tags),
            price=item.price,
        )


class MenuOut(BaseModel):
    id: str | None
    name: str
    uncategorized: bool = False
    items: list[ItemOut]

    @classmethod
    def from_section(cls, section: MenuSection) -> MenuOut:
        orphan = isinstance(section, OrphanBucket)
        return cls(
            id=None if orphan else section.id,
            name=section.name,
            uncategorized=orphan,
            items=[ItemOut.from_item(i) for i in section.items],
        )


class RestaurantOut(BaseModel):
    id: str
    name: str
    location: str | None
    rating: float | None
    cuisines: list[str]
    ambience: list[str]
    menus: list[MenuOut]

    @classmethod
    def from_restaurant(cls, restaurant: Restaurant) -> RestaurantOut:
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            location=restaurant.location,
            rating=restaurant.rating,
            cuisines=sorted(restaurant.cuisines),
            ambience=sorted(restaurant.ambience),
            menus=[MenuOut.from_section(m) for m in restaurant.menus],
        )


class ScoreDetails(BaseModel):
    log_liked: float
    log_not_liked: float
    features: list[str]


class RecommendationItem(BaseModel):
    restaurant: RestaurantOut
    probability: float = Field(..., ge=0.0, le=1.0)
    details: ScoreDetails | None = None

    @classmethod
    def from_scored(cls, scored: ScoredRestaurant) -> RecommendationItem:
        details = None
        if scored.details is not None:
            details = ScoreDetails(
                log_liked=scored.details.log_liked,
                log_not_liked=scored.details.log_not_liked,
                features=sorted(scored.details.features),
            )
        return cls(
            restaurant=RestaurantOut.from_restaurant(scored.restaurant),
            probability=round(scored.probability, 6),
            details=details,
        )


class RecommendationResponse(BaseModel):
    user_id: str | None
    recommendations: list[RecommendationItem]
    total_candidates: int


class FeatureWeight(BaseModel):
    feature: str
    log_odds: float


class ModelSummary(BaseModel):
    user_id: str
    catalog_size: int
    liked_count: int
    not_liked_count: int
    vocabulary_size: int
    log_prior_liked: float
    log_prior_not_liked: float
    positive_ids: list[str]
    top_features: list[FeatureWeight]

    @classmethod
    def from_model(cls, user_id: str, model: NaiveBayesModel, limit: int = 10) -> ModelSummary:
        return cls(
            user_id=user_id,
            catalog_size=model.catalog_size,
            liked_count=model.liked_count,
            not_liked_count=model.not_liked_count,
            vocabulary_size=len(model.vocabulary),
            log_prior_liked=model.log_prior_liked,
            log_prior_not_liked=model.log_prior_not_liked,
            positive_ids=sorted(model.positive_ids),
            top_features=[
                FeatureWeight(feature=f, log_odds=w) for f, w in top_features(model, limit)
            ],
        )
