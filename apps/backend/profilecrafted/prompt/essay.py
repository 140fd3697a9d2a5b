from typing import List, Optional, Tuple

from ..schemas.pydantic import ParsedResume, Scorecard

RESUME_EXCERPT_CHARS = 3000
STRONGEST_CATEGORY_COUNT = 3

SYSTEM_INSTRUCTION = (
    "You are an expert product manager and career coach specializing in APM applications. "
    "Write compelling, authentic essays that highlight the candidate's unique strengths and fit "
    "for the role. Keep the tone professional yet conversational, and keep the essay close to "
    "the requested word count."
)

REGENERATION_SYSTEM_INSTRUCTION = (
    "You are an expert product manager and career coach. Generate a different version of the essay "
    "with varied structure and emphasis while maintaining the same core information. Avoid repeating "
    "the exact same phrases or structure as the previous version."
)

SYSTEM_ROLE = "You are an expert career storyteller and product management hiring advisor."

REQUIREMENTS = [
    "Be around {target_words} words (±5%)",
    "Be written in a confident yet humble first-person tone",
    "Highlight the candidate's accomplishments and skills directly relevant to the {company} APM criteria",
    "Show curiosity, creativity, technical fluency, product thinking, and leadership",
    "Maintain clarity, strong structure, and engaging flow",
    "Avoid bullet points; use cohesive paragraphs",
    "Do NOT repeat the same point in different words",
    "Do NOT make up achievements not present in the provided data",
]

APM_CRITERIA = [
    "Exceptional talent from traditional or unconventional backgrounds",
    "Self-starter with high standards, work ethic, and creativity",
    "Insatiable curiosity and tinkerer's spirit",
    "Strong AI product user with technical understanding",
    "Excellent communication, problem definition, and planning skills",
    "Ability to collaborate effectively with top engineers and diverse teams",
    "Leadership with humility and enthusiasm",
]

ADDITIONAL_NOTES = [
    "Focus more on the candidate's strongest categories from the scoring module",
    "Maintain a narrative that aligns naturally with {company}'s mission and culture",
    "Conclude with a future-facing statement about contributing to {company}'s AI products",
]

PROMPT = """{system_role}

Your task is to create a compelling ~{target_words}-word written response for the {company} {position} (APM) program application.

The output must:
{requirements}

{company} APM Program Key Criteria:
{criteria}

Additional Notes:
{notes}

Candidate Data:
- Overall APM Fit Score: {overall}/100
{category_scores}

Strongest Categories: {strongest}
{profile}
Resume Content:
\"\"\"
{resume}
\"\"\"

Generate a compelling, personalized essay based on this data."""

REGENERATION_SUFFIX = """

Previous essay to avoid repeating:
\"\"\"
{prior_essay}
\"\"\"

Provide a fresh perspective with different examples and structure. Do not reuse the previous essay's phrasing, opening, or paragraph order."""

FEEDBACK_SUFFIX = """

User feedback for this version: {feedback}"""


def strongest_categories(scorecard: Scorecard, count: int = STRONGEST_CATEGORY_COUNT) -> List[Tuple[str, int]]:
    """Categories sorted by score descending; ties keep rubric order."""
    ranked = sorted(scorecard.categories, key=lambda item: -item.value)
    return [(item.category.value, item.value) for item in ranked[:count]]


def _bullets(items: List[str], **fmt) -> str:
    return "\n".join(f"- {item.format(**fmt)}" for item in items)


def _numbered(items: List[str]) -> str:
    return "\n".join(f"{index}. {item}" for index, item in enumerate(items, start=1))


def _profile_lines(parsed: Optional[ParsedResume]) -> str:
    if parsed is None:
        return ""
    lines = [
        f"- Experience Level: {parsed.experience.years_of_experience} years detected",
        f"- Technical Skills: {', '.join(parsed.skills.technical) or 'Not specified'}",
        f"- Product Skills: {', '.join(parsed.skills.product) or 'Not specified'}",
        f"- Companies: {', '.join(parsed.experience.companies[:3]) or 'Not specified'}",
        f"- Education: {', '.join(parsed.education.institutions) or 'Not specified'}",
    ]
    return "\nCandidate Profile:\n" + "\n".join(lines) + "\n"


def truncate_excerpt(text: str, limit: int = RESUME_EXCERPT_CHARS) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit].rsplit(" ", 1)[0] + " ..."


def build_essay_prompt(
    scorecard: Scorecard,
    resume_text: str,
    parsed: Optional[ParsedResume] = None,
    is_regeneration: bool = False,
    prior_essay: Optional[str] = None,
    feedback: Optional[str] = None,
    target_words: int = 400,
    company: str = "Perplexity",
    position: str = "Associate Product Manager",
) -> str:
    """
    Assemble the essay prompt. Everything except the score interpolation,
    the strongest-category ranking and the resume excerpt is static text.
    """
    fmt = {"company": company, "target_words": target_words}
    strongest = ", ".join(f"{name} ({value}/100)" for name, value in strongest_categories(scorecard))
    category_scores = "\n".join(
        f"- {item.category.value}: {item.value}/100" for item in scorecard.categories
    )

    prompt = PROMPT.format(
        system_role=SYSTEM_ROLE,
        target_words=target_words,
        company=company,
        position=position,
        requirements=_bullets(REQUIREMENTS, **fmt),
        criteria=_numbered(APM_CRITERIA),
        notes=_bullets(ADDITIONAL_NOTES, **fmt),
        overall=scorecard.overall,
        category_scores=category_scores,
        strongest=strongest,
        profile=_profile_lines(parsed),
        resume=truncate_excerpt(resume_text) or "Not provided",
    )

    if is_regeneration:
        prompt += REGENERATION_SUFFIX.format(prior_essay=prior_essay if prior_essay and prior_essay.strip() else "None provided")
    if feedback and feedback.strip():
        prompt += FEEDBACK_SUFFIX.format(feedback=feedback.strip())
    return prompt
