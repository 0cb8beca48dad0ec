"""
Client for the match-score endpoint with an offline fallback.

Used by rendering contexts that call the API over HTTP. When the API cannot
be reached or answers badly, the score is computed locally with the reduced
scorer so the caller always gets a result.
"""
from typing import List, NamedTuple, Optional, Tuple

import requests
from pydantic import ValidationError as PydanticValidationError

from app.helpers.reasoning import MatchBand, band_color, band_for
from app.models.models import MatchResult
from app.services.matching import get_scorer
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

MATCH_SCORE_PATH = "/api/ai/match-score"
VISIBLE_SKILL_LIMIT = 5


class ScoreDisplay(NamedTuple):
    score: int
    band: MatchBand
    color: str
    skills: List[str]
    more: int


def visible_skills(matched: List[str], limit: int = VISIBLE_SKILL_LIMIT) -> Tuple[List[str], int]:
    """First ``limit`` skills plus how many are hidden behind "+N more"."""
    return list(matched[:limit]), max(0, len(matched) - limit)


def describe(result: MatchResult) -> ScoreDisplay:
    skills, more = visible_skills(result.matched_skills)
    return ScoreDisplay(
        score=result.score,
        band=band_for(result.score),
        color=band_color(result.score),
        skills=skills,
        more=more,
    )


class MatchScoreClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10,
        session: requests.Session = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.fallback = get_scorer("reduced")

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def score(self, job_description: str, candidate_bio: str, skills: List[str]) -> MatchResult:
        """Remote score if available, otherwise the local reduced score."""
        try:
            resp = self.session.post(
                f"{self.base_url}{MATCH_SCORE_PATH}",
                json={
                    "jobDescription": job_description,
                    "candidateBio": candidate_bio,
                    "skills": list(skills or []),
                },
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Match score API unreachable, scoring locally: {e.__class__.__name__}")
            return self.fallback.score(job_description, candidate_bio, skills)

        if not resp.ok:
            logger.warning(f"Match score API returned HTTP {resp.status_code}, scoring locally")
            return self.fallback.score(job_description, candidate_bio, skills)

        try:
            return MatchResult.model_validate(resp.json())
        except (ValueError, PydanticValidationError):
            logger.warning("Match score API returned a malformed body, scoring locally")
            return self.fallback.score(job_description, candidate_bio, skills)
