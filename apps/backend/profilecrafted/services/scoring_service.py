import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..schemas.pydantic import CategoryScore, ParsedResume, RubricCategory, Scorecard

logger = logging.getLogger(__name__)

KEYWORD_POINTS = 60
SKILL_POINTS_PER_SKILL = 2
SKILL_POINTS_MAX = 20
QUANTIFIABLE_BONUS = 15
RELEVANT_EXPERIENCE_BONUS = 10
STRENGTH_THRESHOLD = 75
IMPROVEMENT_THRESHOLD = 60
GREAT_STRENGTH_THRESHOLD = 80
MAX_LISTED = 2

GREAT_STRENGTH_ADVICE = "Great strength! Continue leveraging this in your essay."


@dataclass(frozen=True)
class CategoryRubric:
    category: RubricCategory
    weight: float
    keywords: Tuple[str, ...]
    tips: Tuple[str, ...]


RUBRIC: List[CategoryRubric] = [
    CategoryRubric(
        category=RubricCategory.TECHNICAL_FLUENCY,
        weight=0.25,
        keywords=(
            "python", "javascript", "sql", "api", "programming",
            "coding", "software", "engineering", "development",
            "aws", "cloud", "database", "git", "agile",
        ),
        tips=(
            "Highlight specific programming languages and tools you've used",
            "Include technical projects with measurable outcomes",
            "Mention any API integrations or database work",
        ),
    ),
    CategoryRubric(
        category=RubricCategory.PRODUCT_THINKING,
        weight=0.25,
        keywords=(
            "product", "user experience", "metrics", "analytics",
            "a/b testing", "roadmap", "strategy", "market research",
            "user research", "kpi", "growth", "optimization",
        ),
        tips=(
            "Emphasize user-focused problem solving experiences",
            "Include examples of data-driven decision making",
            "Highlight any product analytics or A/B testing experience",
        ),
    ),
    CategoryRubric(
        category=RubricCategory.CURIOSITY_CREATIVITY,
        weight=0.20,
        keywords=(
            "innovation", "creative", "experiment", "prototype",
            "research", "learning", "hackathon", "side project",
            "blog", "writing", "speaking", "conference",
        ),
        tips=(
            "Showcase side projects or personal learning initiatives",
            "Mention any innovation challenges or hackathons",
            "Include examples of creative problem-solving",
        ),
    ),
    CategoryRubric(
        category=RubricCategory.COMMUNICATION_CLARITY,
        weight=0.15,
        keywords=(
            "presentation", "communication", "writing", "documentation",
            "teaching", "mentoring", "leadership", "collaboration",
            "stakeholder", "cross-functional",
        ),
        tips=(
            "Highlight presentations or documentation you've created",
            "Include cross-functional collaboration examples",
            "Mention any teaching or mentoring experience",
        ),
    ),
    CategoryRubric(
        category=RubricCategory.LEADERSHIP_TEAMWORK,
        weight=0.15,
        keywords=(
            "lead", "team", "manage", "coordinate", "organize",
            "project management", "scrum master", "mentored",
            "collaborated", "cross-functional", "volunteer",
        ),
        tips=(
            "Include team lead or project management experience",
            "Highlight volunteer work or community involvement",
            "Mention any mentoring or coaching roles",
        ),
    ),
]

RUBRIC_BY_CATEGORY: Dict[RubricCategory, CategoryRubric] = {r.category: r for r in RUBRIC}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def experience_multiplier(years: int) -> float:
    if years <= 0:
        return 0.8
    if years <= 2:
        return 1.0
    if years <= 4:
        return 0.95
    return 0.9


def experience_level(years: int, relevant: bool) -> str:
    if years <= 0 and not relevant:
        return "Entry Level"
    if years <= 2:
        return "Junior"
    if years <= 4:
        return "Mid-Level"
    return "Senior"


def advice_for(rubric: CategoryRubric, value: int) -> List[str]:
    if value >= GREAT_STRENGTH_THRESHOLD:
        return [GREAT_STRENGTH_ADVICE]
    if value >= IMPROVEMENT_THRESHOLD:
        return [rubric.tips[0]]
    return list(rubric.tips)


class RubricScorer:
    """
    Scores a parsed resume against the five APM rubric categories.

    Category value = keyword ratio * 60 plus bounded bonuses for detected
    skills, quantifiable results and relevant experience, clamped to 0..100.
    Overall = weighted sum of category values times an experience multiplier.
    """

    def __init__(self, rubric: List[CategoryRubric] = RUBRIC) -> None:
        self.rubric = rubric

    def category_value(self, parsed: ParsedResume, rubric: CategoryRubric) -> int:
        text = parsed.raw_text.lower()
        matched = [keyword for keyword in rubric.keywords if keyword in text]
        score = len(matched) / len(rubric.keywords) * KEYWORD_POINTS

        if parsed.skills.total_skills_count > 0:
            score += min(SKILL_POINTS_MAX, parsed.skills.total_skills_count * SKILL_POINTS_PER_SKILL)
        if parsed.achievements.has_quantifiable_results:
            score += QUANTIFIABLE_BONUS
        if parsed.experience.has_relevant_experience:
            score += RELEVANT_EXPERIENCE_BONUS

        return round_half_up(clamp(score))

    def score(self, parsed: ParsedResume) -> Scorecard:
        values = {rubric.category: self.category_value(parsed, rubric) for rubric in self.rubric}
        return self.from_values(
            values,
            years=parsed.experience.years_of_experience,
            has_relevant_experience=parsed.experience.has_relevant_experience,
        )

    def from_values(
        self,
        values: Dict[RubricCategory, int],
        years: Optional[int] = None,
        has_relevant_experience: bool = False,
    ) -> Scorecard:
        """
        Build a scorecard from already known category values. Without `years`
        no experience multiplier is applied. Missing categories count as 0.
        """
        categories = []
        for rubric in self.rubric:
            value = values.get(rubric.category, 0)
            tips = advice_for(rubric, value)
            categories.append(CategoryScore(
                category=rubric.category,
                value=value,
                weight=rubric.weight,
                advice=tips[0],
                tips=tips,
            ))

        weighted = sum(item.value * item.weight for item in categories)
        multiplier = experience_multiplier(years) if years is not None else 1.0
        years = years or 0
        overall = round_half_up(clamp(weighted * multiplier))

        strengths = [c.category for c in categories if c.value >= STRENGTH_THRESHOLD][:MAX_LISTED]
        improvements = [c.category for c in categories if c.value < IMPROVEMENT_THRESHOLD][:MAX_LISTED]

        logger.info(
            f"Scored resume: overall={overall}, years={years}, "
            f"categories={[c.value for c in categories]}"
        )
        return Scorecard(
            overall=overall,
            categories=categories,
            strengths=strengths,
            improvements=improvements,
            experience_level=experience_level(years, has_relevant_experience),
            years_of_experience=years,
        )
