"""
Score banding and human-readable reasoning for match results.

Both scorers and the client widget band scores through ``band_for`` so the
thresholds cannot drift between them.
"""
from enum import Enum
from typing import NamedTuple

from app.helpers.constants import (
    EXCELLENT_THRESHOLD,
    GOOD_THRESHOLD,
    MODERATE_THRESHOLD,
    RECOMMEND_APPLY_THRESHOLD,
    RECOMMEND_HIGHLIGHT_THRESHOLD,
    SOME_KEYWORD_ALIGNMENT,
    STRONG_KEYWORD_ALIGNMENT,
)


class MatchBand(str, Enum):
    """Coarse quality band of a 0-100 match score"""
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    LIMITED = "limited"


class BandStyle(NamedTuple):
    headline: str
    color: str


BAND_STYLES = {
    MatchBand.EXCELLENT: BandStyle("Excellent match!", "green"),
    MatchBand.GOOD: BandStyle("Good match!", "yellow"),
    MatchBand.MODERATE: BandStyle("Moderate match.", "orange"),
    MatchBand.LIMITED: BandStyle("Limited match currently.", "red"),
}


def band_for(score: float) -> MatchBand:
    if score >= EXCELLENT_THRESHOLD:
        return MatchBand.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return MatchBand.GOOD
    if score >= MODERATE_THRESHOLD:
        return MatchBand.MODERATE
    return MatchBand.LIMITED


def band_color(score: float) -> str:
    return BAND_STYLES[band_for(score)].color


def skill_match_percent(matched_count: int, total_skills: int) -> int:
    if total_skills <= 0:
        return 0
    return round(matched_count / total_skills * 100)


def detailed_reasoning(
    score: int,
    matched_skills_count: int,
    total_skills: int,
    keyword_matches: int,
    domain_matches: int,
) -> str:
    """
    Build the reasoning text for the full scorer.

    Args:
        score: Final 0-100 score
        matched_skills_count: Number of candidate skills that matched
        total_skills: Number of candidate skills considered
        keyword_matches: Job keywords also found in the bio
        domain_matches: Domains shared by job and bio

    Returns:
        Sentence-per-signal reasoning string
    """
    parts = [BAND_STYLES[band_for(score)].headline]

    percent = skill_match_percent(matched_skills_count, total_skills)
    parts.append(
        f"You have {matched_skills_count} of {total_skills} relevant skills "
        f"({percent}% skill match)."
    )

    if keyword_matches > STRONG_KEYWORD_ALIGNMENT:
        parts.append(f"Strong keyword alignment with {keyword_matches} matching terms.")
    elif keyword_matches > SOME_KEYWORD_ALIGNMENT:
        parts.append(f"Some keyword alignment with {keyword_matches} matching terms.")

    if domain_matches > 0:
        parts.append("Domain expertise alignment detected.")

    if score >= RECOMMEND_APPLY_THRESHOLD:
        parts.append("Consider applying - you're a strong candidate for this role.")
    elif score >= RECOMMEND_HIGHLIGHT_THRESHOLD:
        parts.append("Consider highlighting your transferable skills and relevant experience.")
    else:
        parts.append("This could be a growth opportunity. Consider developing more of the required skills.")

    return " ".join(parts)


def brief_reasoning(score: int, matched_count: int) -> str:
    """Lower-precision reasoning used by the reduced scorer"""
    band = band_for(score)
    headline = BAND_STYLES[band].headline
    if band is MatchBand.EXCELLENT:
        return f"{headline} You have {matched_count} of the key skills and your background aligns well with the role."
    if band is MatchBand.GOOD:
        return f"{headline} You have {matched_count} relevant skills. Consider highlighting your transferable experience."
    if band is MatchBand.MODERATE:
        return f"{headline} You have {matched_count} relevant skills. This could be a growth opportunity."
    return f"{headline} Consider developing more of the required skills for better alignment."
