import logging

import pytest
import requests
from unittest.mock import MagicMock, patch

from app.helpers.constants import PLACEHOLDER_API_KEY
from app.models.ai_settings import LLMSettings
from app.models.models import MatchInput, MatchResult
from app.services.ai_backend import OpenAIMatchBackend
from app.services.match_service import MatchScoreService
from app.services.matching import FullScorer, ReducedScorer, get_scorer
from app.utils.exceptions import ExternalServiceError, ModelError, ValidationError

JOB = "Senior backend engineer with Node.js and PostgreSQL experience"
BIO = "Backend developer skilled in Node.js and SQL databases"
SKILLS = ["Node.js", "PostgreSQL", "React"]

AI_RESULT = MatchResult(
    score=91, matched_skills=["Node.js"], reasoning="AI says yes", keyword_matches=7, skill_matches=1
)


@pytest.fixture
def match_input():
    return MatchInput(job_description=JOB, candidate_bio=BIO, skills=SKILLS)


@pytest.fixture
def rule_based_result():
    return FullScorer().score(JOB, BIO, SKILLS)


class TestMatchScoreService:
    """Test cases for AI selection and fallback"""

    def test_default_scorer_comes_from_factory(self):
        with patch("app.services.match_service.get_scorer", wraps=get_scorer) as factory:
            service = MatchScoreService()

        factory.assert_called_once_with("full")
        assert isinstance(service.scorer, FullScorer)

    def test_rule_based_when_ai_not_enabled(self, match_input, rule_based_result, ai_backend):
        service = MatchScoreService(ai_backend=ai_backend, ai_enabled=False)

        assert service.compute(match_input) == rule_based_result
        ai_backend.score.assert_not_called()

    def test_placeholder_credential_never_invokes_backend(self, match_input, rule_based_result, ai_backend):
        settings = LLMSettings(api_key=PLACEHOLDER_API_KEY)
        service = MatchScoreService(ai_backend=ai_backend, ai_enabled=settings.is_configured)

        for _ in range(3):
            assert service.compute(match_input) == rule_based_result
        ai_backend.score.assert_not_called()

    def test_from_settings_without_real_credential_has_no_backend(self):
        for key in ("", "   ", PLACEHOLDER_API_KEY):
            service = MatchScoreService.from_settings(LLMSettings(api_key=key))
            assert service.ai_enabled is False
            assert service.ai_backend is None

    def test_from_settings_with_credential_builds_backend(self):
        service = MatchScoreService.from_settings(LLMSettings(api_key="sk-live"))
        assert service.ai_enabled is True
        assert isinstance(service.ai_backend, OpenAIMatchBackend)

    def test_ai_result_returned_when_backend_succeeds(self, match_input, ai_backend):
        ai_backend.score.return_value = AI_RESULT
        service = MatchScoreService(ai_backend=ai_backend, ai_enabled=True)

        assert service.compute(match_input) == AI_RESULT
        ai_backend.score.assert_called_once_with(JOB, BIO, SKILLS)

    @pytest.mark.parametrize("error", [
        ExternalServiceError("AI backend returned HTTP 500", status_code=500),
        ModelError("Invalid JSON response from AI backend"),
        requests.Timeout("read timed out"),
        ValueError("unexpected"),
    ])
    def test_any_ai_failure_falls_back_once(self, match_input, rule_based_result, ai_backend, error):
        ai_backend.score.side_effect = error
        service = MatchScoreService(ai_backend=ai_backend, ai_enabled=True)

        assert service.compute(match_input) == rule_based_result
        assert ai_backend.score.call_count == 1

    def test_fallback_uses_injected_scorer(self, match_input, ai_backend):
        ai_backend.score.side_effect = ModelError("No response from AI backend")
        service = MatchScoreService(scorer=ReducedScorer(), ai_backend=ai_backend, ai_enabled=True)

        assert service.compute(match_input) == ReducedScorer().score(JOB, BIO, SKILLS)

    def test_fallback_is_logged_without_credential(self, match_input, caplog):
        settings = LLMSettings(api_key="sk-very-secret")
        backend = OpenAIMatchBackend(settings, session=MagicMock())
        backend.session.post.side_effect = requests.ConnectionError("sk-very-secret refused")
        service = MatchScoreService(ai_backend=backend, ai_enabled=True)

        with caplog.at_level(logging.WARNING):
            service.compute(match_input)

        assert "falling back" in caplog.text
        assert "sk-very-secret" not in caplog.text

    @pytest.mark.parametrize("job,bio", [("", BIO), (JOB, ""), ("   ", BIO)])
    def test_blank_text_is_a_validation_error(self, job, bio, ai_backend):
        service = MatchScoreService(ai_backend=ai_backend, ai_enabled=True)

        with pytest.raises(ValidationError):
            service.compute(MatchInput(job_description=job, candidate_bio=bio, skills=[]))
        ai_backend.score.assert_not_called()


class TestConfiguredBackendFailures:
    """A configured backend answering badly still yields the rule-based shape"""

    def test_http_500_falls_back(self, match_input, rule_based_result):
        service = MatchScoreService.from_settings(LLMSettings(api_key="sk-live"))
        error_response = MagicMock(status_code=500)

        with patch("app.utils.utils.requests.post", return_value=error_response) as mock_post:
            result = service.compute(match_input)

        mock_post.assert_called_once()
        assert result == rule_based_result
        assert set(result.to_wire()) == {"score", "matchedSkills", "reasoning", "keywordMatches", "skillMatches"}
