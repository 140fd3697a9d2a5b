import logging
from dataclasses import dataclass
from typing import Optional

from ..agent import AgentManager, GenerationUnavailableError
from ..core import settings as default_settings, Settings
from ..prompt.essay import (
    build_essay_prompt,
    SYSTEM_INSTRUCTION,
    REGENERATION_SYSTEM_INSTRUCTION,
)
from ..schemas.pydantic import CategoryScore, ParsedResume, RubricCategory, Scorecard

logger = logging.getLogger(__name__)

WORD_COUNT_TOLERANCE = 20
FALLBACK_PROVIDER = "template"

CLOSING_SENTENCES = [
    "This opportunity represents the perfect intersection of my technical curiosity, product "
    "instincts, and passion for empowering users through better information discovery.",
    "I am confident that my blend of hands-on experience and eagerness to learn would let me "
    "contribute from the first week while continuing to grow alongside an exceptional team.",
    "Above all, I want to build products that earn the trust of the people who rely on them, "
    "and I would bring that standard to every problem I take on.",
    "I would welcome the chance to keep learning from talented engineers and designers while "
    "shipping work that makes a measurable difference for users.",
]


def count_words(text: str) -> int:
    return len(text.split())


def normalize_word_count(essay: str, target_words: int = 400) -> str:
    """
    Bring an essay close to the target length.

    Longer than target+20 words: keep the first `target_words` words and end
    with a period. Shorter than target-20: append fixed closing sentences
    until the floor is reached. Truncation can cut a sentence mid-clause.
    """
    essay = (essay or "").strip()
    words = essay.split()
    if len(words) > target_words + WORD_COUNT_TOLERANCE:
        truncated = " ".join(words[:target_words]).rstrip(",;:-")
        if not truncated.endswith((".", "!", "?")):
            truncated += "."
        return truncated

    floor = target_words - WORD_COUNT_TOLERANCE
    index = 0
    while count_words(essay) < floor:
        essay = f"{essay} {CLOSING_SENTENCES[index % len(CLOSING_SENTENCES)]}".strip()
        index += 1
    return essay


OPENING_TEMPLATE = (
    "As an aspiring {position} at {company}, I am driven by an insatiable curiosity about how AI "
    "can transform the way people discover and interact with information. My journey has been "
    "shaped by a unique blend of {top} and {second}, positioning me to contribute meaningfully "
    "to {company}'s mission of making knowledge accessible through innovative AI-powered products."
)

PRIMARY_TEMPLATES = {
    RubricCategory.TECHNICAL_FLUENCY: (
        "My technical foundation, reflected in my {score}/100 technical fluency score, enables me to "
        "bridge the gap between complex AI systems and user-centric product experiences. I have "
        "consistently demonstrated the ability to understand technical constraints while advocating "
        "for user needs, ensuring that innovative solutions remain accessible and intuitive. This "
        "grounding allows me to collaborate effectively with engineering teams and translate ambitious "
        "product visions into feasible implementations."
    ),
    RubricCategory.PRODUCT_THINKING: (
        "What distinguishes my approach is my product thinking, scoring {score}/100. I look for the "
        "user pain points that others might overlook and translate them into compelling product "
        "opportunities. My method combines user research, competitive analysis, and data-driven "
        "hypothesis testing to build products that solve real problems, and it has consistently led "
        "to solutions that resonate with users and drive meaningful engagement."
    ),
    RubricCategory.CURIOSITY_CREATIVITY: (
        "My curiosity and creativity, rated at {score}/100, fuel my passion for exploring "
        "unconventional solutions to complex problems. I am naturally drawn to the intersection of "
        "emerging technologies and user experience, constantly experimenting with new approaches to "
        "make sophisticated AI capabilities more accessible. This mindset has led me to solutions that "
        "challenge traditional assumptions about how users interact with information."
    ),
    RubricCategory.COMMUNICATION_CLARITY: (
        "Communication has been one of my defining strengths, with a clarity score of {score}/100. I "
        "distill complex technical concepts into clear, actionable insights for diverse stakeholders. "
        "Whether presenting to engineers, executives, or end users, I focus on creating shared "
        "understanding that drives alignment and accelerates decision-making, which has proven "
        "invaluable in cross-functional environments."
    ),
    RubricCategory.LEADERSHIP_TEAMWORK: (
        "My leadership and teamwork abilities, scoring {score}/100, have been cultivated through "
        "collaborative projects where I coordinated diverse teams toward common goals. I believe in "
        "leading with humility and enthusiasm, creating environments where every team member feels "
        "empowered to contribute their best work. This approach has consistently resulted in stronger "
        "solutions and more cohesive team dynamics."
    ),
}

SECONDARY_TEMPLATES = {
    RubricCategory.TECHNICAL_FLUENCY: (
        "My technical understanding, demonstrated by my {score}/100 score in this area, allows me to "
        "engage meaningfully with engineering teams and understand how technical decisions shape the "
        "user experience. I am comfortable navigating technical discussions while keeping the focus on "
        "user outcomes and business objectives."
    ),
    RubricCategory.PRODUCT_THINKING: (
        "My product thinking skills, reflected in my {score}/100 score, let me see beyond immediate "
        "features to broader user journeys and market opportunities. I approach product challenges "
        "with a systematic method that balances user needs, technical feasibility, and business impact."
    ),
    RubricCategory.CURIOSITY_CREATIVITY: (
        "The creativity that earned me a {score}/100 score drives me to explore new approaches to "
        "familiar problems. I am particularly excited about the potential for AI to create entirely "
        "new categories of user experiences that we have not yet imagined."
    ),
    RubricCategory.COMMUNICATION_CLARITY: (
        "My communication skills, scoring {score}/100, help me build bridges between technical and "
        "non-technical stakeholders. I create clarity in complex situations and make sure every team "
        "member is aligned on objectives and priorities."
    ),
    RubricCategory.LEADERSHIP_TEAMWORK: (
        "The collaborative leadership that earned me a {score}/100 score has taught me to build "
        "consensus while keeping momentum toward ambitious goals. I thrive in environments where "
        "diverse perspectives come together to solve challenging problems."
    ),
}

CLOSING_TEMPLATE = (
    "Looking ahead, I am excited about the opportunity to contribute to {company}'s evolution as an "
    "AI-powered answer engine. The intersection of conversational AI, real-time information retrieval, "
    "and user experience design is exactly the kind of complex, impactful challenge that energizes me. "
    "I am eager to bring my perspective and collaborative approach to help {company} keep pushing the "
    "boundaries of AI-powered information discovery."
)

_SENTENCE_NAMES = {
    RubricCategory.TECHNICAL_FLUENCY: "technical fluency",
    RubricCategory.PRODUCT_THINKING: "product thinking",
    RubricCategory.CURIOSITY_CREATIVITY: "curiosity and creativity",
    RubricCategory.COMMUNICATION_CLARITY: "communication clarity",
    RubricCategory.LEADERSHIP_TEAMWORK: "leadership and teamwork",
}


def build_fallback_essay(
    scorecard: Scorecard,
    company: str = "Perplexity",
    position: str = "Associate Product Manager",
) -> str:
    """Deterministic template essay, paragraphs ordered strongest category first."""
    ranked = sorted(scorecard.categories, key=lambda item: -item.value)
    if not ranked:
        ranked = [CategoryScore(category=category, value=0, weight=0.0, advice="") for category in RubricCategory]
    top = ranked[0]
    second = ranked[1] if len(ranked) > 1 else ranked[0]
    paragraphs = [
        OPENING_TEMPLATE.format(
            position=position,
            company=company,
            top=_SENTENCE_NAMES[top.category],
            second=_SENTENCE_NAMES[second.category],
        ),
        PRIMARY_TEMPLATES[top.category].format(score=top.value),
    ]
    if second is not top:
        paragraphs.append(SECONDARY_TEMPLATES[second.category].format(score=second.value))
    paragraphs.append(CLOSING_TEMPLATE.format(company=company))
    return "\n\n".join(paragraphs)


@dataclass
class EssayResult:
    essay: str
    word_count: int
    fallback_used: bool
    provider: str


class EssayService:
    """
    Builds the essay prompt, runs it through the provider chain and
    normalizes the length. When no provider answers, the deterministic
    template essay is returned instead, so callers always get text back.
    """

    def __init__(self, agent_manager: AgentManager, settings: Settings = default_settings) -> None:
        self.agent_manager = agent_manager
        self.settings = settings

    def build_prompt(self, scorecard: Scorecard, resume_text: str, parsed: Optional[ParsedResume] = None, **kwargs) -> str:
        return build_essay_prompt(
            scorecard,
            resume_text,
            parsed=parsed,
            target_words=self.settings.ESSAY_TARGET_WORDS,
            company=self.settings.COMPANY_NAME,
            position=self.settings.POSITION_TITLE,
            **kwargs,
        )

    async def _complete(self, prompt: str, scorecard: Scorecard, system: str, temperature: float) -> EssayResult:
        target = self.settings.ESSAY_TARGET_WORDS
        try:
            text, provider = await self.agent_manager.run(prompt, system=system, temperature=temperature)
            fallback_used = False
        except GenerationUnavailableError as e:
            logger.warning(f"Essay generation unavailable, using template essay. Attempts: {e.attempts}")
            text = build_fallback_essay(
                scorecard,
                company=self.settings.COMPANY_NAME,
                position=self.settings.POSITION_TITLE,
            )
            provider = FALLBACK_PROVIDER
            fallback_used = True

        essay = normalize_word_count(text, target)
        return EssayResult(
            essay=essay,
            word_count=count_words(essay),
            fallback_used=fallback_used,
            provider=provider,
        )

    async def generate(
        self,
        scorecard: Scorecard,
        resume_text: str,
        parsed: Optional[ParsedResume] = None,
    ) -> EssayResult:
        prompt = self.build_prompt(scorecard, resume_text, parsed)
        return await self._complete(
            prompt, scorecard, SYSTEM_INSTRUCTION, self.settings.LLM_TEMPERATURE
        )

    async def regenerate(
        self,
        scorecard: Scorecard,
        resume_text: str,
        current_essay: str,
        parsed: Optional[ParsedResume] = None,
        feedback: Optional[str] = None,
    ) -> EssayResult:
        prompt = self.build_prompt(
            scorecard,
            resume_text,
            parsed,
            is_regeneration=True,
            prior_essay=current_essay,
            feedback=feedback,
        )
        return await self._complete(
            prompt, scorecard, REGENERATION_SYSTEM_INSTRUCTION, self.settings.LLM_REGENERATION_TEMPERATURE
        )
