"""
AI completion backend for match scoring.

Sends one prompt per call to an OpenAI-compatible chat-completions endpoint
and turns the JSON reply into a ``MatchResult`` that honours the same
invariants as the rule-based scorers.
"""
import math
from typing import Any, Dict, List

import requests

from app.helpers.prompts import build_match_prompt
from app.helpers.reasoning import brief_reasoning
from app.models.ai_settings import LLMSettings
from app.models.models import MatchResult
from app.services.matching import round_score, unique_skills
from app.utils.exceptions import ModelError
from app.utils.logging_config import get_logger, PerformanceMonitor
from app.utils.utils import as_non_negative_int, as_str_list, chat_completion, parse_json_object

logger = get_logger(__name__)


def restrict_to_input_skills(reported: List[str], skills: List[str]) -> List[str]:
    """Keep only input skills named in ``reported``, in input order and casing."""
    wanted = {s.lower() for s in reported}
    return [s for s in unique_skills(skills) if s.strip().lower() in wanted]


def sanitize_ai_reply(data: Dict[str, Any], skills: List[str], model_name: str = None) -> MatchResult:
    """Coerce a parsed AI reply into a valid MatchResult.

    Raises:
        ModelError: when the reply carries no usable numeric score
    """
    raw_score = data.get("score")
    try:
        score_value = float(raw_score)
    except (TypeError, ValueError):
        raise ModelError("AI reply has no numeric score", model_name=model_name)
    if isinstance(raw_score, bool) or math.isnan(score_value):
        raise ModelError("AI reply has no numeric score", model_name=model_name)

    score = round_score(score_value)
    matched = restrict_to_input_skills(as_str_list(data.get("matchedSkills")), skills)
    reasoning = data.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        reasoning = brief_reasoning(score, len(matched))

    return MatchResult(
        score=score,
        matched_skills=matched,
        reasoning=reasoning.strip(),
        keyword_matches=as_non_negative_int(data.get("keywordMatches")),
        skill_matches=as_non_negative_int(data.get("skillMatches"), default=len(matched)),
    )


class OpenAIMatchBackend:
    """Match scoring through a chat-completions model."""

    name = "ai"

    def __init__(self, settings: LLMSettings, session: requests.Session = None):
        self.settings = settings
        self.session = session

    def score(self, job_description: str, candidate_bio: str, skills: List[str]) -> MatchResult:
        prompt = build_match_prompt(job_description, candidate_bio, skills)
        with PerformanceMonitor("ai match score", logger=logger, threshold_ms=self.settings.timeout * 500):
            content = chat_completion(
                prompt,
                api_key=self.settings.api_key.get_secret_value(),
                base_url=self.settings.base_url,
                model=self.settings.model_name,
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
                timeout=self.settings.timeout,
                session=self.session,
            )
        data = parse_json_object(content)
        return sanitize_ai_reply(data, skills, model_name=self.settings.model_name)
