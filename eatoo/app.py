from __future__ import annotations

import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import SessionIdentity, require_admin, require_user
from .auth.users import authenticate
from .catalog.config import DEFAULT_CATALOG_CONFIG
from .catalog.sources import FixtureSource
from .recommendations.errors import EmptyCatalogError
from .recommendations.models import (
    LoginRequest,
    ModelSummary,
    RecommendationItem,
    RecommendationResponse,
)
from .recommendations.naive_bayes import ScoredRestaurant
from .recommendations.service import RecommendationService

app = FastAPI(title="Eatoo Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "eatoo-secret-change-in-production"),
)

_service: RecommendationService | None = None


def get_service() -> RecommendationService:
    """Return the process-wide service over the bundled fixture catalog."""
    global _service
    if _service is None:
        source = FixtureSource(DEFAULT_CATALOG_CONFIG.fixtures_dir)
        _service = RecommendationService(catalog_source=source, list_source=source)
    return _service


def _to_response(
    user_id: str | None, results: list[ScoredRestaurant], limit: int | None,
) -> RecommendationResponse:
    shown = results[:limit] if limit else results
    return RecommendationResponse(
        user_id=user_id,
        recommendations=[RecommendationItem.from_scored(r) for r in shown],
        total_candidates=len(results),
    )


def _empty_catalog(exc: EmptyCatalogError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(exc))


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata(service: RecommendationService = Depends(get_service)) -> dict:
    catalog = service.load_catalog()
    cuisines: set[str] = set()
    ambience: set[str] = set()
    for restaurant in catalog.restaurants.values():
        cuisines.update(c.lower() for c in restaurant.cuisines)
        ambience.update(a.lower() for a in restaurant.ambience)
    return {
        "restaurants": len(catalog),
        "cuisines": sorted(cuisines),
        "ambience": sorted(ambience),
    }


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/recommendations", response_model=RecommendationResponse)
def recommendations(
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=100),
    user: dict = Depends(require_user),
    service: RecommendationService = Depends(get_service),
) -> RecommendationResponse:
    identity = SessionIdentity(request)
    try:
        results = service.get_recommendations_for_current_user(identity)
    except EmptyCatalogError as exc:
        raise _empty_catalog(exc) from exc
    return _to_response(identity.current_user_id(), results, limit)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/recommendations/{user_id}", response_model=RecommendationResponse)
def recommendations_for_user(
    user_id: str,
    limit: int | None = Query(default=None, ge=1, le=100),
    include_scores: bool = False,
    user: dict = Depends(require_admin),
    service: RecommendationService = Depends(get_service),
) -> RecommendationResponse:
    try:
        results = service.get_recommendations_for_user(user_id, include_scores=include_scores)
    except EmptyCatalogError as exc:
        raise _empty_catalog(exc) from exc
    return _to_response(user_id, results, limit)


@app.get("/model/{user_id}", response_model=ModelSummary)
def model_summary(
    user_id: str,
    top: int = Query(default=10, ge=1, le=50),
    user: dict = Depends(require_admin),
    service: RecommendationService = Depends(get_service),
) -> ModelSummary:
    try:
        model = service.build_model_for_user(user_id)
    except EmptyCatalogError as exc:
        raise _empty_catalog(exc) from exc
    return ModelSummary.from_model(user_id, model, limit=top)


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())
