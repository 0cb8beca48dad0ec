from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

# -------- Match score --------
class MatchScoreRequest(BaseModel):
    """Body of POST /api/ai/match-score.

    Text fields are optional here so a missing value reaches the route and is
    reported as a 400, not as a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    job_description: Optional[str] = Field(default=None, alias="jobDescription")
    candidate_bio: Optional[str] = Field(default=None, alias="candidateBio")
    skills: List[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def none_skills_to_empty(cls, v):
        return [] if v is None else v

    def has_required_text(self) -> bool:
        return bool((self.job_description or "").strip()) and bool((self.candidate_bio or "").strip())


# -------- Status --------
class AIStatusResponse(BaseModel):
    ai_configured: bool
    model: Optional[str] = None
    scorer: str
