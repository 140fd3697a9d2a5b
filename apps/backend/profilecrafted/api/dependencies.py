from typing import Optional

from fastapi import Request

from ..core import Settings
from ..schemas.pydantic import ParsedResume
from ..services import (
    DocumentTextExtractor,
    EmailService,
    EssayService,
    ExportService,
    RateLimiter,
    ResumeParser,
    ResumeValidationError,
    RubricScorer,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_extractor(request: Request) -> DocumentTextExtractor:
    return request.app.state.extractor


def get_parser(request: Request) -> ResumeParser:
    return request.app.state.parser


def get_scorer(request: Request) -> RubricScorer:
    return request.app.state.scorer


def get_essay_service(request: Request) -> EssayService:
    return request.app.state.essay_service


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_export_service(request: Request) -> ExportService:
    return request.app.state.export_service


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def enforce_rate_limit(request: Request) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    limiter.hit(client_ip(request))


def resolve_resume(
    parser: ResumeParser,
    resume_data: Optional[ParsedResume],
    resume_text: Optional[str],
) -> ParsedResume:
    """Structured resume data wins; raw text is parsed. Neither is a 400."""
    if resume_data is not None:
        return resume_data
    if resume_text and resume_text.strip():
        return parser.parse(resume_text)
    raise ResumeValidationError("Resume data or resume text is required")
