import logging
import uuid

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from ...core import Settings
from ...schemas.pydantic import (
    ScorecardRequest,
    ScorecardResponse,
    UploadedResume,
    UploadResponse,
)
from ...services import (
    DocumentTextExtractor,
    FileTooLargeError,
    ResumeParser,
    ResumeValidationError,
    RubricScorer,
    UnsupportedFormatError,
)
from ..dependencies import (
    enforce_rate_limit,
    get_extractor,
    get_parser,
    get_scorer,
    get_settings,
    resolve_resume,
)

logger = logging.getLogger(__name__)

resume_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@resume_router.post(
    "/upload-resume",
    response_model=UploadResponse,
    summary="Upload a PDF or DOCX resume, extract its text and score it",
)
async def upload_resume(
    resume: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
    extractor: DocumentTextExtractor = Depends(get_extractor),
    parser: ResumeParser = Depends(get_parser),
    scorer: RubricScorer = Depends(get_scorer),
) -> UploadResponse:
    """
    Accepts a resume file in the `resume` multipart field.

    The MIME type is checked before the body is read. The file is then size
    checked, its text extracted, parsed and scored in one pass.
    """
    if not extractor.is_supported(resume.content_type):
        raise UnsupportedFormatError(content_type=resume.content_type)

    max_bytes = settings.MAX_UPLOAD_BYTES
    if resume.size is not None and resume.size > max_bytes:
        raise FileTooLargeError(max_bytes=max_bytes, size=resume.size)

    content = await resume.read()
    if not content:
        raise ResumeValidationError("No file uploaded")
    if len(content) > max_bytes:
        raise FileTooLargeError(max_bytes=max_bytes, size=len(content))

    text = await run_in_threadpool(extractor.extract, content, resume.content_type)
    parsed = parser.parse(text)
    scorecard = scorer.score(parsed)

    session_id = uuid.uuid4().hex
    logger.info(f"Resume {resume.filename} parsed for session {session_id}, overall {scorecard.overall}")
    data = UploadedResume(
        **parsed.model_dump(),
        session_id=session_id,
        metadata={
            "filename": resume.filename,
            "contentType": resume.content_type,
            "size": len(content),
            "wordCount": len(text.split()),
            "characterCount": len(text),
        },
    )
    return UploadResponse(data=data, analysis=scorecard)


@resume_router.post(
    "/generate-scorecard",
    response_model=ScorecardResponse,
    summary="Score structured resume data or raw resume text",
)
@resume_router.post("/analyze", response_model=ScorecardResponse, include_in_schema=False)
async def generate_scorecard(
    payload: ScorecardRequest,
    parser: ResumeParser = Depends(get_parser),
    scorer: RubricScorer = Depends(get_scorer),
) -> ScorecardResponse:
    parsed = resolve_resume(parser, payload.resume_data, payload.resume_text)
    return ScorecardResponse(scorecard=scorer.score(parsed))
