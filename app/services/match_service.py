"""
Match Score Service: chooses between the AI backend and the rule-based scorer
"""
from typing import Optional

from app.models.ai_settings import LLMSettings
from app.models.models import MatchInput, MatchResult
from app.services.ai_backend import OpenAIMatchBackend
from app.services.matching import Scorer, get_scorer
from app.utils.exceptions import ValidationError
from app.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)


class MatchScoreService:
    """Computes match scores, preferring the AI backend when it is enabled.

    The AI path gets exactly one attempt per call. Any failure falls back to
    the rule-based scorer, so ``compute`` only raises for invalid input.
    """

    def __init__(self, scorer: Scorer = None, ai_backend=None, ai_enabled: bool = False):
        self.scorer = scorer or get_scorer("full")
        self.ai_backend = ai_backend
        self.ai_enabled = bool(ai_enabled and ai_backend is not None)

    @classmethod
    def from_settings(cls, llm_settings: LLMSettings, scorer: Scorer = None) -> "MatchScoreService":
        backend = OpenAIMatchBackend(llm_settings) if llm_settings.is_configured else None
        return cls(scorer=scorer, ai_backend=backend, ai_enabled=llm_settings.is_configured)

    def compute(self, match_input: MatchInput) -> MatchResult:
        if not match_input.job_description.strip() or not match_input.candidate_bio.strip():
            raise ValidationError("Job description and candidate bio are required")

        if self.ai_enabled:
            result = self._try_ai(match_input)
            if result is not None:
                return result

        with PerformanceMonitor(f"{self.scorer.name} rule-based score", logger=logger, threshold_ms=100):
            return self.scorer.score(
                match_input.job_description, match_input.candidate_bio, match_input.skills
            )

    def _try_ai(self, match_input: MatchInput) -> Optional[MatchResult]:
        try:
            return self.ai_backend.score(
                match_input.job_description, match_input.candidate_bio, match_input.skills
            )
        except Exception as e:
            reason = getattr(e, "message", None) or e.__class__.__name__
            logger.warning(
                f"AI match scoring failed, falling back to {self.scorer.name} scorer: {reason}",
                extra={"error_type": e.__class__.__name__},
            )
            return None
