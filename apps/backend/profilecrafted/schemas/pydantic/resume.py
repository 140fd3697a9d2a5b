from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import CamelModel


class ContactInfo(CamelModel):
    email: Optional[str] = None
    phone: Optional[str] = None


class SkillsSummary(CamelModel):
    technical: List[str] = Field(default_factory=list)
    product: List[str] = Field(default_factory=list)
    total_skills_count: int = 0


class ExperienceSummary(CamelModel):
    companies: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    years_of_experience: int = 0
    has_relevant_experience: bool = False


class EducationSummary(CamelModel):
    has_education: bool = False
    institutions: List[str] = Field(default_factory=list)
    degrees: List[str] = Field(default_factory=list)


class AchievementsSummary(CamelModel):
    achievements: List[str] = Field(default_factory=list)
    has_quantifiable_results: bool = False


class ParsedResume(CamelModel):
    raw_text: str
    contact: ContactInfo = Field(default_factory=ContactInfo)
    skills: SkillsSummary = Field(default_factory=SkillsSummary)
    experience: ExperienceSummary = Field(default_factory=ExperienceSummary)
    education: EducationSummary = Field(default_factory=EducationSummary)
    achievements: AchievementsSummary = Field(default_factory=AchievementsSummary)


class UploadedResume(ParsedResume):
    session_id: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
