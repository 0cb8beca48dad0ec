import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.models.ai_settings import AppSettings, LLMSettings
from app.services.auth import BearerTokenSessionProvider
from app.services.match_service import MatchScoreService
from app.utils.exceptions import ModelError

TOKEN = "test-token"
PAYLOAD = {
    "jobDescription": "Senior backend engineer with Node.js and PostgreSQL experience",
    "candidateBio": "Backend developer skilled in Node.js and SQL databases",
    "skills": ["Node.js", "PostgreSQL", "React"],
}
RESULT_KEYS = {"score", "matchedSkills", "reasoning", "keywordMatches", "skillMatches"}


def make_client(service: MatchScoreService) -> TestClient:
    from app.main import create_app

    return TestClient(create_app(
        settings=AppSettings(),
        service=service,
        session_provider=BearerTokenSessionProvider([TOKEN]),
    ))


class TestMatchScoreRouter:
    """Test cases for POST /api/ai/match-score"""

    def test_success_returns_camel_case_result(self, client, auth_headers):
        response = client.post("/api/ai/match-score", json=PAYLOAD, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == RESULT_KEYS
        assert data["matchedSkills"] == ["Node.js", "PostgreSQL"]
        assert data["score"] == 38
        assert "X-Request-ID" in response.headers

    def test_skills_default_to_empty(self, client, auth_headers):
        payload = {k: v for k, v in PAYLOAD.items() if k != "skills"}

        response = client.post("/api/ai/match-score", json=payload, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["matchedSkills"] == []

    def test_unauthenticated(self, client):
        response = client.post("/api/ai/match-score", json=PAYLOAD)

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Authentication required"

    def test_wrong_token(self, client):
        response = client.post(
            "/api/ai/match-score", json=PAYLOAD, headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    def test_authentication_checked_before_validation(self, client):
        response = client.post("/api/ai/match-score", json={"skills": []})
        assert response.status_code == 401

    @pytest.mark.parametrize("payload", [
        {"candidateBio": "Backend developer", "skills": []},
        {"jobDescription": "Backend engineer", "skills": []},
        {"jobDescription": "   ", "candidateBio": "Backend developer"},
        {"jobDescription": "Backend engineer", "candidateBio": None},
    ])
    def test_missing_text_is_400(self, client, auth_headers, payload):
        response = client.post("/api/ai/match-score", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Job description and candidate bio are required"

    def test_wrong_types_are_422(self, client, auth_headers):
        payload = {**PAYLOAD, "skills": "Node.js"}

        response = client.post("/api/ai/match-score", json=payload, headers=auth_headers)

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_ai_failure_is_absorbed(self, auth_headers):
        backend = MagicMock()
        backend.score.side_effect = ModelError("Invalid JSON response from AI backend")
        client = make_client(MatchScoreService(ai_backend=backend, ai_enabled=True))

        response = client.post("/api/ai/match-score", json=PAYLOAD, headers=auth_headers)

        assert response.status_code == 200
        assert set(response.json()) == RESULT_KEYS
        backend.score.assert_called_once()

    def test_unexpected_failure_is_generic_500(self, auth_headers):
        scorer = MagicMock()
        scorer.name = "full"
        scorer.score.side_effect = RuntimeError("boom: internal detail")
        client = make_client(MatchScoreService(scorer=scorer))

        response = client.post("/api/ai/match-score", json=PAYLOAD, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to calculate match score"
        assert "internal detail" not in response.text


class TestStatusAndHealth:
    """Test cases for status and liveness endpoints"""

    def test_status_without_ai(self, client, auth_headers):
        response = client.get("/api/ai/status", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"ai_configured": False, "model": None, "scorer": "full"}

    def test_status_with_ai_hides_credential(self, auth_headers):
        service = MatchScoreService.from_settings(LLMSettings(api_key="sk-hidden", model_name="gpt-test"))
        client = make_client(service)

        response = client.get("/api/ai/status", headers=auth_headers)

        assert response.json() == {"ai_configured": True, "model": "gpt-test", "scorer": "full"}
        assert "sk-hidden" not in response.text

    def test_status_requires_auth(self, client):
        assert client.get("/api/ai/status").status_code == 401

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "ok"
