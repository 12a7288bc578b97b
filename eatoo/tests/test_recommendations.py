from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from eatoo.app import app, get_service
from eatoo.recommendations.errors import EmptyCatalogError

client = TestClient(app)


def _login(c, username="user", password="user123"):
    c.post("/auth/login", json={"username": username, "password": password})


def _login_admin(c):
    _login(c, "admin", "admin123")


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata_lists_catalog_tags():
    body = client.get("/metadata").json()
    assert body["restaurants"] == 5
    assert body["cuisines"] == ["cafe", "italian", "japanese", "malaysian", "mamak", "thai"]
    assert "family friendly" in body["ambience"]


def test_recommendations_for_session_user():
    _login(client)
    resp = client.get("/recommendations")
    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == "user-1"
    ids = {item["restaurant"]["id"] for item in body["recommendations"]}
    assert ids == {"rest-sakura-ramen", "rest-kampung-kitchen"}
    assert body["total_candidates"] == 2


def test_recommendations_never_include_listed_restaurants():
    _login(client)
    body = client.get("/recommendations").json()
    ids = {item["restaurant"]["id"] for item in body["recommendations"]}
    assert ids.isdisjoint({"rest-bangkok-spice", "rest-pizza-house", "rest-espresso-bar"})


def test_recommendations_probability_ordering():
    _login(client, "newbie", "newbie123")
    body = client.get("/recommendations").json()
    probabilities = [item["probability"] for item in body["recommendations"]]
    assert len(probabilities) == 5
    assert probabilities == sorted(probabilities, reverse=True)
    assert all(0.0 <= p < 0.5 for p in probabilities)


def test_recommendations_respects_limit():
    _login(client, "newbie", "newbie123")
    body = client.get("/recommendations", params={"limit": 2}).json()
    assert len(body["recommendations"]) == 2
    assert body["total_candidates"] == 5


def test_recommendations_validation_rejects_bad_limit():
    _login(client)
    resp = client.get("/recommendations", params={"limit": 0})
    assert resp.status_code == 422


def test_recommendations_include_uncategorized_menu():
    _login(client)
    body = client.get("/recommendations").json()
    kampung = next(
        item["restaurant"] for item in body["recommendations"]
        if item["restaurant"]["id"] == "rest-kampung-kitchen"
    )
    assert [m["name"] for m in kampung["menus"]] == ["Uncategorized"]
    assert kampung["menus"][0]["uncategorized"] is True
    assert kampung["menus"][0]["id"] is None


def test_admin_without_user_id_gets_no_recommendations():
    c = TestClient(app)
    _login_admin(c)
    resp = c.get("/recommendations")
    assert resp.status_code == 200
    assert resp.json() == {"user_id": None, "recommendations": [], "total_candidates": 0}


def test_admin_can_recommend_for_any_user_with_scores():
    c = TestClient(app)
    _login_admin(c)
    resp = c.get("/recommendations/user-2", params={"include_scores": True})
    assert resp.status_code == 200
    body = resp.json()
    ids = [item["restaurant"]["id"] for item in body["recommendations"]]
    assert sorted(ids) == ["rest-bangkok-spice", "rest-kampung-kitchen"]
    details = body["recommendations"][0]["details"]
    assert details["log_liked"] < 0
    assert "cuisine:thai" in details["features"] or "cuisine:malaysian" in details["features"]


def test_model_summary():
    c = TestClient(app)
    _login_admin(c)
    resp = c.get("/model/user-1", params={"top": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["catalog_size"] == 5
    assert body["liked_count"] == 3
    assert body["not_liked_count"] == 2
    assert body["positive_ids"] == ["rest-bangkok-spice", "rest-espresso-bar", "rest-pizza-house"]
    assert len(body["top_features"]) == 3
    weights = [f["log_odds"] for f in body["top_features"]]
    assert weights == sorted(weights, reverse=True)


def test_empty_catalog_maps_to_service_unavailable():
    service = MagicMock()
    service.get_recommendations_for_user.side_effect = EmptyCatalogError("no restaurants")
    service.build_model_for_user.side_effect = EmptyCatalogError("no restaurants")
    app.dependency_overrides[get_service] = lambda: service
    try:
        c = TestClient(app)
        _login_admin(c)
        assert c.get("/recommendations/user-1").status_code == 503
        assert c.get("/model/user-1").status_code == 503
    finally:
        app.dependency_overrides.clear()
