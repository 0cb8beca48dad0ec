import asyncio

from fastapi import APIRouter, Depends, Request

from app.models.models import MatchInput, MatchResult
from app.models.schemas import AIStatusResponse, MatchScoreRequest
from app.services.auth import SessionUser, require_user
from app.services.match_service import MatchScoreService
from app.utils.exceptions import MatchScoreBaseException, ScoringError, ValidationError
from app.utils.logging_config import get_logger, log_api_call

router = APIRouter(prefix="/ai", tags=["match-score"])
logger = get_logger(__name__)


def get_match_service(request: Request) -> MatchScoreService:
    return request.app.state.match_service


@router.post(
    "/match-score",
    response_model=MatchResult,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
@log_api_call("match_score")
async def match_score(
    request: Request,
    payload: MatchScoreRequest,
    user: SessionUser = Depends(require_user),
    service: MatchScoreService = Depends(get_match_service),
):
    """Score how well a candidate fits a job description"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    if not payload.has_required_text():
        logger.warning("Match score request missing text fields", extra={"request_id": request_id})
        raise ValidationError("Job description and candidate bio are required", field="jobDescription/candidateBio")

    match_input = MatchInput(
        job_description=payload.job_description,
        candidate_bio=payload.candidate_bio,
        skills=payload.skills,
    )

    loop = asyncio.get_running_loop()
    try:
        result = await loop.run_in_executor(None, service.compute, match_input)
    except MatchScoreBaseException:
        raise
    except Exception as e:
        logger.error(
            f"Match score calculation failed: {e.__class__.__name__}",
            extra={"request_id": request_id, "user_id": user.user_id},
        )
        raise ScoringError("Failed to calculate match score", scorer=service.scorer.name) from e

    logger.info(
        f"Match score computed: {result.score}",
        extra={"request_id": request_id, "user_id": user.user_id, "matched_skills": len(result.matched_skills)},
    )
    return result


@router.get("/status", response_model=AIStatusResponse)
async def ai_status(
    user: SessionUser = Depends(require_user),
    service: MatchScoreService = Depends(get_match_service),
):
    """Report whether the AI backend is in use; never exposes the credential"""
    model = None
    if service.ai_enabled:
        model = getattr(getattr(service.ai_backend, "settings", None), "model_name", None)
    return AIStatusResponse(ai_configured=service.ai_enabled, model=model, scorer=service.scorer.name)
