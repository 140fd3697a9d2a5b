from enum import Enum
from typing import List

from pydantic import Field

from .base import CamelModel


class RubricCategory(str, Enum):
    TECHNICAL_FLUENCY = "Technical Fluency"
    PRODUCT_THINKING = "Product Thinking"
    CURIOSITY_CREATIVITY = "Curiosity & Creativity"
    COMMUNICATION_CLARITY = "Communication Clarity"
    LEADERSHIP_TEAMWORK = "Leadership & Teamwork"


class CategoryScore(CamelModel):
    category: RubricCategory
    value: int = Field(ge=0, le=100)
    weight: float
    advice: str
    tips: List[str] = Field(default_factory=list)


class Scorecard(CamelModel):
    overall: int = Field(ge=0, le=100)
    categories: List[CategoryScore]
    strengths: List[RubricCategory] = Field(default_factory=list, max_length=2)
    improvements: List[RubricCategory] = Field(default_factory=list, max_length=2)
    experience_level: str = "Entry Level"
    years_of_experience: int = 0
