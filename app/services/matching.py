import math
import re
from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from app.helpers import constants as C
from app.helpers.reasoning import brief_reasoning, detailed_reasoning
from app.models.models import MatchResult

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def extract_keywords(text: str) -> List[str]:
    """Unique meaningful tokens of ``text``, in first-seen order."""
    words = _WHITESPACE.split(_NON_WORD.sub(" ", (text or "").lower()))
    keywords = [
        w for w in words
        if len(w) >= C.MIN_KEYWORD_LENGTH
        and w not in C.STOP_WORDS
        and not w.isdigit()
    ]
    return list(dict.fromkeys(keywords))


def unique_skills(skills: Iterable[str]) -> List[str]:
    """Drop blank and case-insensitively repeated skills, keeping first casing."""
    seen = set()
    out = []
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        key = skill.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(skill)
    return out


def keyword_overlap(job_keywords: List[str], bio_keywords: List[str]) -> int:
    bio_set = set(bio_keywords)
    return sum(1 for k in job_keywords if k in bio_set)


def _token_overlaps(skill: str, tokens: Iterable[str]) -> bool:
    return any(t in skill or skill in t for t in tokens)


def match_skills(skills: List[str], job_text: str, bio_text: str, bio_keywords: List[str]) -> List[str]:
    """Skills found verbatim in either text or overlapping a bio keyword."""
    job_lower = job_text.lower()
    bio_lower = bio_text.lower()
    matched = []
    for skill in skills:
        s = skill.strip().lower()
        if s in job_lower or s in bio_lower or _token_overlaps(s, bio_keywords):
            matched.append(skill)
    return matched


def experience_level(text: str) -> Optional[str]:
    lowered = text.lower()
    for level in C.EXPERIENCE_LEVELS:
        if level in lowered:
            return level
    return None


def experience_bonus(job_text: str, bio_text: str) -> int:
    job_level = experience_level(job_text)
    if job_level is None:
        return 0
    return C.EXPERIENCE_BONUS if job_level == experience_level(bio_text) else 0


def domains_in(text: str) -> List[str]:
    lowered = text.lower()
    return [d for d in C.DOMAINS if d in lowered]


def domain_matches(job_text: str, bio_text: str) -> int:
    bio_domains = set(domains_in(bio_text))
    return sum(1 for d in domains_in(job_text) if d in bio_domains)


def round_score(value: float) -> int:
    """Clamp to [0, 100] and round half up."""
    clamped = max(C.MIN_SCORE, min(C.MAX_SCORE, value))
    return int(math.floor(clamped + 0.5))


def _blank(*texts: str) -> bool:
    return any(not (t or "").strip() for t in texts)


@runtime_checkable
class Scorer(Protocol):
    """Rule-based match scoring strategy."""

    name: str

    def score(self, job_description: str, candidate_bio: str, skills: List[str]) -> MatchResult:
        ...


class FullScorer:
    """Canonical scorer: keyword, skill, experience and domain signals."""

    name = "full"

    def components(
        self, job_description: str, candidate_bio: str, skills: List[str]
    ) -> Tuple[float, float, int, int, List[str], int, int]:
        """
        Compute the individual scoring signals.

        Returns:
            (keyword_score, skill_score, experience_bonus, domain_score,
             matched_skills, keyword_matches, domain_match_count)
        """
        candidate_skills = unique_skills(skills)
        if _blank(job_description, candidate_bio):
            return 0.0, 0.0, 0, 0, [], 0, 0

        job_keywords = extract_keywords(job_description)
        bio_keywords = extract_keywords(candidate_bio)

        keyword_matches = keyword_overlap(job_keywords, bio_keywords)
        keyword_score = min(
            keyword_matches / max(len(job_keywords), C.KEYWORD_MIN_DENOMINATOR) * C.KEYWORD_WEIGHT,
            C.KEYWORD_WEIGHT,
        )

        matched = match_skills(candidate_skills, job_description, candidate_bio, bio_keywords)
        skill_score = min(
            len(matched) / max(len(candidate_skills), 1) * C.SKILL_WEIGHT,
            C.SKILL_WEIGHT,
        )

        bonus = experience_bonus(job_description, candidate_bio)
        domains = domain_matches(job_description, candidate_bio)
        domain_score = min(domains * C.DOMAIN_POINTS_PER_MATCH, C.DOMAIN_SCORE_CAP)

        return keyword_score, skill_score, bonus, domain_score, matched, keyword_matches, domains

    def score(self, job_description: str, candidate_bio: str, skills: List[str]) -> MatchResult:
        (keyword_score, skill_score, bonus, domain_score,
         matched, keyword_matches, domains) = self.components(job_description, candidate_bio, skills)

        total = round_score(keyword_score + skill_score + bonus + domain_score)
        reasoning = detailed_reasoning(
            total, len(matched), len(unique_skills(skills)), keyword_matches, domains
        )
        return MatchResult(
            score=total,
            matched_skills=matched,
            reasoning=reasoning,
            keyword_matches=keyword_matches,
            skill_matches=len(matched),
        )


class ReducedScorer:
    """Degraded scorer for offline use: text similarity and skill ratio only."""

    name = "reduced"

    def score(self, job_description: str, candidate_bio: str, skills: List[str]) -> MatchResult:
        candidate_skills = unique_skills(skills)
        if _blank(job_description, candidate_bio):
            return MatchResult(
                score=0, matched_skills=[], reasoning=brief_reasoning(0, 0), skill_matches=0
            )

        job_keywords = extract_keywords(job_description)
        bio_keywords = extract_keywords(candidate_bio)

        common = keyword_overlap(job_keywords, bio_keywords)
        longest = max(len(job_keywords), len(bio_keywords))
        text_similarity = min(common / longest * 100, C.REDUCED_TEXT_SIMILARITY_CAP) if longest else 0.0

        job_lower = job_description.lower()
        matched = [
            skill for skill in candidate_skills
            if skill.strip().lower() in job_lower
            or _token_overlaps(skill.strip().lower(), bio_keywords)
        ]
        skill_score = len(matched) / max(len(candidate_skills), 1) * C.REDUCED_SKILL_WEIGHT

        total = round_score(text_similarity + skill_score)
        return MatchResult(
            score=total,
            matched_skills=matched,
            reasoning=brief_reasoning(total, len(matched)),
            skill_matches=len(matched),
        )


SCORERS = {
    FullScorer.name: FullScorer,
    ReducedScorer.name: ReducedScorer,
}


def get_scorer(name: str = FullScorer.name) -> Scorer:
    """Factory: scorer strategy by execution context ('full' or 'reduced')."""
    try:
        return SCORERS[name]()
    except KeyError:
        raise ValueError(f"Unknown scorer '{name}'") from None
