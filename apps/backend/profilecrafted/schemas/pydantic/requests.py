from typing import Dict, Optional

from pydantic import Field

from .base import CamelModel
from .resume import ParsedResume
from .scorecard import RubricCategory, Scorecard


class ScorecardRequest(CamelModel):
    resume_data: Optional[ParsedResume] = None
    resume_text: Optional[str] = None


class EssayRequest(CamelModel):
    resume_data: Optional[ParsedResume] = None
    resume_text: Optional[str] = None
    scorecard: Optional[Scorecard] = None
    session_id: Optional[str] = None


class RegenerateEssayRequest(EssayRequest):
    current_essay: Optional[str] = None
    feedback: Optional[str] = None


class ExportRequest(CamelModel):
    export_type: Optional[str] = None
    essay: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None


class EmailRequest(CamelModel):
    email: Optional[str] = None
    essay: Optional[str] = None
    name: Optional[str] = None


class RubricScores(CamelModel):
    technical_fluency: int = Field(ge=0, le=100)
    product_thinking: int = Field(ge=0, le=100)
    curiosity_creativity: int = Field(ge=0, le=100)
    communication_clarity: int = Field(ge=0, le=100)
    leadership_teamwork: int = Field(ge=0, le=100)

    def by_category(self) -> Dict[RubricCategory, int]:
        return {
            RubricCategory.TECHNICAL_FLUENCY: self.technical_fluency,
            RubricCategory.PRODUCT_THINKING: self.product_thinking,
            RubricCategory.CURIOSITY_CREATIVITY: self.curiosity_creativity,
            RubricCategory.COMMUNICATION_CLARITY: self.communication_clarity,
            RubricCategory.LEADERSHIP_TEAMWORK: self.leadership_teamwork,
        }


class PromptRequest(CamelModel):
    scores: RubricScores
    resume_content: Optional[str] = None
