"""
Tests for the HTTP API.

Personalities are stateless on the server: every request carries the
serialized personality and every response returns the updated one.
"""

import pytest
from fastapi.testclient import TestClient

from dynasty.api.main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def player_payload() -> dict:
    return {"id": "qb-1", "position": "QB", "age": 27, "overall": 90, "name": "Joe Burrow"}


@pytest.fixture
def generated(client, player_payload) -> dict:
    """A personality generated through the API."""
    response = client.post(
        "/api/v1/personality/generate",
        json={"player": player_payload, "current_year": 2025, "seed": 11},
    )
    assert response.status_code == 200
    return response.json()["personality"]


@pytest.fixture
def offer_payload() -> dict:
    return {
        "years": 3,
        "total_value": 60_000_000,
        "apy": 20_000_000,
        "guaranteed_amount": 40_000_000,
        "team_quality": 0.7,
        "location_match": 0.6,
    }


@pytest.fixture
def team_payload() -> dict:
    return {
        "team_id": "DAL",
        "city": "Dallas",
        "state": "TX",
        "market_size": "large",
        "climate": "warm",
        "is_contender": True,
    }


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "Dynasty API"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["archetypes"] > 0


class TestPersonalityEndpoints:
    """Generation and evolution over HTTP."""

    def test_generate_is_reproducible_with_seed(self, client, player_payload):
        request = {"player": player_payload, "current_year": 2025, "seed": 5}
        first = client.post("/api/v1/personality/generate", json=request).json()
        second = client.post("/api/v1/personality/generate", json=request).json()

        assert first == second
        assert first["archetype"] == first["personality"]["archetype"]
        assert first["blended"] is False

    def test_generate_rejects_unknown_position(self, client, player_payload):
        player_payload["position"] = "QBX"
        response = client.post(
            "/api/v1/personality/generate",
            json={"player": player_payload, "current_year": 2025},
        )
        assert response.status_code == 422

    def test_life_event_applies_impact(self, client, generated):
        response = client.post(
            "/api/v1/personality/life-events",
            json={"personality": generated, "event_type": "major_injury", "year": 2025, "week": 3},
        )
        assert response.status_code == 200
        body = response.json()

        traits = {c["trait"] for c in body["applied_changes"]}
        assert traits == {"guarantee_priority", "risk_tolerance"}
        assert len(body["personality"]["evolution"]["life_events"]) == 1
        assert body["summary"].startswith("Evolution Count:")

    def test_cooling_trait_reports_no_change(self, client, generated):
        first = client.post(
            "/api/v1/personality/market-experiences",
            json={"personality": generated, "experience_type": "failed_holdout", "year": 2025, "week": 1},
        ).json()
        second = client.post(
            "/api/v1/personality/market-experiences",
            json={"personality": first["personality"], "experience_type": "failed_holdout", "year": 2025, "week": 2},
        ).json()

        assert [c["trait"] for c in first["applied_changes"]] == ["holdout_threshold"]
        assert second["applied_changes"] == []
        assert (
            second["personality"]["behaviors"]["holdout_threshold"]
            == first["personality"]["behaviors"]["holdout_threshold"]
        )

    def test_tick_fires_age_milestone(self, client, player_payload):
        player_payload["age"] = 29
        personality = client.post(
            "/api/v1/personality/generate",
            json={"player": player_payload, "current_year": 2025, "seed": 2},
        ).json()["personality"]

        response = client.post(
            "/api/v1/personality/tick",
            json={"personality": personality, "current_year": 2026},
        )
        assert response.status_code == 200
        milestones = response.json()["personality"]["evolution"]["age_evolution_milestones"]
        assert [m["age"] for m in milestones] == [30]

    def test_malformed_personality(self, client):
        response = client.post(
            "/api/v1/personality/tick",
            json={"personality": {"player_id": "x"}, "current_year": 2026},
        )
        assert response.status_code == 422


class TestContractEndpoints:
    """Offer evaluation over HTTP."""

    def test_evaluate_offer(self, client, generated, offer_payload, team_payload):
        response = client.post(
            "/api/v1/contracts/evaluate",
            json={"personality": generated, "offer": offer_payload, "team": team_payload},
        )
        assert response.status_code == 200
        body = response.json()

        assert body["player_id"] == "qb-1"
        assert body["decision"] in {"accept", "counter", "reject", "holdout", "shortlist"}
        assert 0.0 <= body["score"] <= 1.0
        assert set(body["score_breakdown"]) == {"base", "hidden_sliders", "final"}
        if body["decision"] == "counter":
            assert body["counter_offer"]["apy"] > offer_payload["apy"]

    def test_evaluation_is_deterministic(self, client, generated, offer_payload, team_payload):
        request = {"personality": generated, "offer": offer_payload, "team": team_payload}
        first = client.post("/api/v1/contracts/evaluate", json=request).json()
        second = client.post("/api/v1/contracts/evaluate", json=request).json()
        assert first == second

    def test_location_match_computed_on_request(self, client, generated, offer_payload, team_payload):
        request = {
            "personality": generated,
            "offer": offer_payload,
            "team": team_payload,
            "compute_location_match": True,
        }
        response = client.post("/api/v1/contracts/evaluate", json=request)
        assert response.status_code == 200

    def test_invalid_offer_is_bad_request(self, client, generated, offer_payload, team_payload):
        offer_payload["guaranteed_amount"] = 90_000_000
        response = client.post(
            "/api/v1/contracts/evaluate",
            json={"personality": generated, "offer": offer_payload, "team": team_payload},
        )
        assert response.status_code == 400

    def test_schema_violation_is_unprocessable(self, client, generated, offer_payload, team_payload):
        offer_payload["years"] = 0
        response = client.post(
            "/api/v1/contracts/evaluate",
            json={"personality": generated, "offer": offer_payload, "team": team_payload},
        )
        assert response.status_code == 422
