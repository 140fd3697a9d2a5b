from .extraction_service import DocumentTextExtractor
from .resume_parser import ResumeParser
from .scoring_service import RubricScorer
from .essay_service import EssayService, EssayResult, build_fallback_essay, normalize_word_count
from .delivery_service import EmailService, ExportService
from .rate_limiter import RateLimiter
from .exceptions import (
    ResumeValidationError,
    UnsupportedFormatError,
    FileTooLargeError,
    ExtractionFailedError,
    RateLimitedError,
    EmailDeliveryError,
)

__all__ = [
    "DocumentTextExtractor",
    "ResumeParser",
    "RubricScorer",
    "EssayService",
    "EssayResult",
    "build_fallback_essay",
    "normalize_word_count",
    "EmailService",
    "ExportService",
    "RateLimiter",
    "ResumeValidationError",
    "UnsupportedFormatError",
    "FileTooLargeError",
    "ExtractionFailedError",
    "RateLimitedError",
    "EmailDeliveryError",
]
