from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class MatchInput(BaseModel):
    """The three texts a match score is computed from"""
    job_description: str
    candidate_bio: str
    skills: List[str] = Field(default_factory=list)


class MatchResult(BaseModel):
    """Score, matched skills and reasoning for one job/candidate pair.

    Serialised with camelCase keys (``matchedSkills`` ...) on the wire.
    """
    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(ge=0, le=100)
    matched_skills: List[str] = Field(default_factory=list, alias="matchedSkills")
    reasoning: str = ""
    keyword_matches: Optional[int] = Field(default=None, ge=0, alias="keywordMatches")
    skill_matches: Optional[int] = Field(default=None, ge=0, alias="skillMatches")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
