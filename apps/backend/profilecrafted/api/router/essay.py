import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from ...core import Settings
from ...schemas.pydantic import (
    EssayRequest,
    EssayResponse,
    PromptRequest,
    PromptResponse,
    RegenerateEssayRequest,
)
from ...services import EssayResult, EssayService, ResumeParser, ResumeValidationError, RubricScorer
from ..dependencies import (
    enforce_rate_limit,
    get_essay_service,
    get_parser,
    get_scorer,
    get_settings,
    resolve_resume,
)

logger = logging.getLogger(__name__)

essay_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


def _response(result: EssayResult, session_id, regenerated: bool = False) -> EssayResponse:
    if result.fallback_used:
        message = "Essay generated using fallback template"
    elif regenerated:
        message = "Essay regenerated successfully"
    else:
        message = "Essay generated successfully"
    return EssayResponse(
        essay=result.essay,
        word_count=result.word_count,
        fallback_used=result.fallback_used,
        provider=result.provider,
        session_id=session_id or uuid.uuid4().hex,
        message=message,
    )


@essay_router.post("/generate-essay", response_model=EssayResponse, summary="Generate an application essay")
async def generate_essay(
    payload: EssayRequest,
    parser: ResumeParser = Depends(get_parser),
    scorer: RubricScorer = Depends(get_scorer),
    essay_service: EssayService = Depends(get_essay_service),
) -> EssayResponse:
    """Missing scorecards are computed from the resume before prompting."""
    parsed = resolve_resume(parser, payload.resume_data, payload.resume_text)
    scorecard = payload.scorecard or scorer.score(parsed)
    result = await essay_service.generate(scorecard, parsed.raw_text, parsed)
    return _response(result, payload.session_id)


@essay_router.post("/regenerate-essay", response_model=EssayResponse, summary="Regenerate an essay")
async def regenerate_essay(
    payload: RegenerateEssayRequest,
    parser: ResumeParser = Depends(get_parser),
    scorer: RubricScorer = Depends(get_scorer),
    essay_service: EssayService = Depends(get_essay_service),
) -> EssayResponse:
    if not payload.current_essay or not payload.current_essay.strip():
        raise ResumeValidationError("Current essay is required for regeneration")
    parsed = resolve_resume(parser, payload.resume_data, payload.resume_text)
    scorecard = payload.scorecard or scorer.score(parsed)
    result = await essay_service.regenerate(
        scorecard,
        parsed.raw_text,
        payload.current_essay,
        parsed=parsed,
        feedback=payload.feedback,
    )
    return _response(result, payload.session_id, regenerated=True)


@essay_router.post("/get-prompt", response_model=PromptResponse, summary="Show the essay prompt for given scores")
async def get_prompt(
    payload: PromptRequest,
    settings: Settings = Depends(get_settings),
    scorer: RubricScorer = Depends(get_scorer),
    essay_service: EssayService = Depends(get_essay_service),
) -> PromptResponse:
    """
    Debugging aid: returns the prompt that would be sent to the LLM for the
    given category scores. Disabled in production.
    """
    if settings.is_production:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Endpoint not available in production")
    scorecard = scorer.from_values(payload.scores.by_category())
    return PromptResponse(prompt=essay_service.build_prompt(scorecard, payload.resume_content or ""))
