"""
Unit tests for RubricScorer.

These tests verify:
1. Category values follow the keyword ratio plus bonus formula
2. The overall score applies weights and the experience multiplier
3. Strengths and improvements are capped and disjoint
4. Scoring is deterministic
"""

import pytest

from profilecrafted.schemas.pydantic import ParsedResume, RubricCategory
from profilecrafted.schemas.pydantic.resume import (
    AchievementsSummary,
    ExperienceSummary,
    SkillsSummary,
)
from profilecrafted.services.scoring_service import (
    GREAT_STRENGTH_ADVICE,
    RUBRIC_BY_CATEGORY,
    advice_for,
    experience_level,
    experience_multiplier,
    round_half_up,
)


class TestRubricScorer:
    """Tests for RubricScorer.score."""

    def test_rich_resume_scores(self, rich_scorecard):
        """A keyword-rich resume lands high in every category."""
        values = {item.category: item.value for item in rich_scorecard.categories}

        assert values[RubricCategory.TECHNICAL_FLUENCY] == 100
        assert values[RubricCategory.PRODUCT_THINKING] == 90
        assert values[RubricCategory.CURIOSITY_CREATIVITY] == 95
        assert values[RubricCategory.COMMUNICATION_CLARITY] == 93
        assert values[RubricCategory.LEADERSHIP_TEAMWORK] == 100
        assert rich_scorecard.overall == 95
        assert rich_scorecard.experience_level == "Junior"
        assert rich_scorecard.years_of_experience == 2

    def test_rich_resume_strengths(self, rich_scorecard):
        """Only the first two qualifying categories are listed."""
        assert rich_scorecard.strengths == [
            RubricCategory.TECHNICAL_FLUENCY,
            RubricCategory.PRODUCT_THINKING,
        ]
        assert rich_scorecard.improvements == []
        assert all(item.advice == GREAT_STRENGTH_ADVICE for item in rich_scorecard.categories)

    def test_keyword_free_resume(self, parser, scorer, keyword_free_resume_text):
        """No keywords and no bonuses means zero everywhere."""
        scorecard = scorer.score(parser.parse(keyword_free_resume_text))

        assert [item.value for item in scorecard.categories] == [0, 0, 0, 0, 0]
        assert scorecard.overall == 0
        assert scorecard.strengths == []
        assert scorecard.improvements == [
            RubricCategory.TECHNICAL_FLUENCY,
            RubricCategory.PRODUCT_THINKING,
        ]
        assert scorecard.experience_level == "Entry Level"
        technical = scorecard.categories[0]
        assert technical.tips == list(RUBRIC_BY_CATEGORY[RubricCategory.TECHNICAL_FLUENCY].tips)

    def test_zero_years_applies_multiplier(self, scorer):
        """Zero detected years scales the weighted sum by 0.8."""
        parsed = ParsedResume(
            raw_text="python sql api",
            skills=SkillsSummary(technical=["python", "sql", "api"], total_skills_count=3),
            experience=ExperienceSummary(years_of_experience=0, has_relevant_experience=True),
            achievements=AchievementsSummary(has_quantifiable_results=True),
        )
        scorecard = scorer.score(parsed)

        # technical: 3/14*60 + 6 + 15 + 10 = 43.86 -> 44, others 31
        assert [item.value for item in scorecard.categories] == [44, 31, 31, 31, 31]
        # (44*.25 + 31*.25 + 31*.2 + 31*.15 + 31*.15) * 0.8 = 27.4
        assert scorecard.overall == 27

    def test_scores_are_bounded_and_deterministic(self, parser, scorer, rich_resume_text):
        parsed = parser.parse(rich_resume_text * 3)
        first = scorer.score(parsed)
        second = scorer.score(parsed)

        assert first == second
        assert 0 <= first.overall <= 100
        assert all(0 <= item.value <= 100 for item in first.categories)

    def test_strengths_and_improvements_are_disjoint(self, scorer):
        parsed = ParsedResume(raw_text="python sql api product roadmap metrics lead team")
        scorecard = scorer.score(parsed)

        assert len(scorecard.strengths) <= 2
        assert len(scorecard.improvements) <= 2
        assert not set(scorecard.strengths) & set(scorecard.improvements)

    def test_weights_sum_to_one(self, rich_scorecard):
        assert sum(item.weight for item in rich_scorecard.categories) == pytest.approx(1.0)

    def test_from_values(self, scorer):
        """Known category values are weighted without a multiplier unless years are given."""
        values = {
            RubricCategory.TECHNICAL_FLUENCY: 80,
            RubricCategory.PRODUCT_THINKING: 70,
            RubricCategory.CURIOSITY_CREATIVITY: 60,
            RubricCategory.COMMUNICATION_CLARITY: 50,
            RubricCategory.LEADERSHIP_TEAMWORK: 40,
        }
        scorecard = scorer.from_values(values)

        assert scorecard.overall == 63
        assert scorecard.strengths == [RubricCategory.TECHNICAL_FLUENCY]
        assert scorecard.improvements == [RubricCategory.COMMUNICATION_CLARITY, RubricCategory.LEADERSHIP_TEAMWORK]
        assert scorer.from_values(values, years=0).overall == 50


@pytest.mark.parametrize(
    "years, expected",
    [(0, 0.8), (1, 1.0), (2, 1.0), (3, 0.95), (4, 0.95), (5, 0.9), (12, 0.9)],
)
def test_experience_multiplier(years, expected):
    assert experience_multiplier(years) == expected


def test_experience_level():
    assert experience_level(0, False) == "Entry Level"
    assert experience_level(0, True) == "Junior"
    assert experience_level(3, True) == "Mid-Level"
    assert experience_level(7, False) == "Senior"


def test_advice_tiers():
    """80+ is a strength, 60-79 gets one tip, below 60 gets every tip."""
    rubric = RUBRIC_BY_CATEGORY[RubricCategory.PRODUCT_THINKING]
    assert advice_for(rubric, 80) == [GREAT_STRENGTH_ADVICE]
    assert advice_for(rubric, 79) == [rubric.tips[0]]
    assert advice_for(rubric, 60) == [rubric.tips[0]]
    assert advice_for(rubric, 59) == list(rubric.tips)


def test_round_half_up():
    assert round_half_up(27.5) == 28
    assert round_half_up(27.49) == 27
    assert round_half_up(0.5) == 1
