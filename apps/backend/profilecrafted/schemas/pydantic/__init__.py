from .resume import (
    ParsedResume,
    UploadedResume,
    ContactInfo,
    SkillsSummary,
    ExperienceSummary,
    EducationSummary,
    AchievementsSummary,
)
from .scorecard import RubricCategory, CategoryScore, Scorecard
from .requests import (
    ScorecardRequest,
    EssayRequest,
    RegenerateEssayRequest,
    ExportRequest,
    EmailRequest,
    RubricScores,
    PromptRequest,
)
from .responses import (
    HealthResponse,
    UploadResponse,
    ScorecardResponse,
    EssayResponse,
    ExportResponse,
    EmailResponse,
    StatusResponse,
    PromptResponse,
)

__all__ = [
    "ParsedResume",
    "UploadedResume",
    "ContactInfo",
    "SkillsSummary",
    "ExperienceSummary",
    "EducationSummary",
    "AchievementsSummary",
    "RubricCategory",
    "CategoryScore",
    "Scorecard",
    "ScorecardRequest",
    "EssayRequest",
    "RegenerateEssayRequest",
    "ExportRequest",
    "EmailRequest",
    "HealthResponse",
    "UploadResponse",
    "ScorecardResponse",
    "EssayResponse",
    "ExportResponse",
    "EmailResponse",
    "RubricScores",
    "PromptRequest",
    "StatusResponse",
    "PromptResponse",
]
