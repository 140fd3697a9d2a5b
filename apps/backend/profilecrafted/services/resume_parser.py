import re
from typing import List, Optional

from ..schemas.pydantic import (
    AchievementsSummary,
    ContactInfo,
    EducationSummary,
    ExperienceSummary,
    ParsedResume,
    SkillsSummary,
)

TECHNICAL_SKILLS = [
    "python", "javascript", "java", "react", "node.js", "sql",
    "aws", "docker", "kubernetes", "git", "agile", "scrum",
    "machine learning", "ai", "data analysis", "api", "rest",
]

PRODUCT_SKILLS = [
    "product management", "user research", "a/b testing", "analytics",
    "roadmap", "strategy", "metrics", "kpi", "user experience", "wireframing",
]

RELEVANT_EXPERIENCE_KEYWORDS = [
    "product", "software", "tech", "startup", "engineering",
    "development", "programming", "coding", "analytics",
]

EDUCATION_KEYWORDS = [
    "university", "college", "bachelor", "master", "phd", "degree",
    "b.s.", "b.a.", "m.s.", "m.a.", "computer science", "engineering",
]

ACHIEVEMENT_VERBS = [
    "increased", "improved", "reduced", "achieved", "delivered",
    "launched", "built", "created", "led", "managed", "grew",
]

ROLE_KEYWORDS = [
    "engineer", "developer", "manager", "analyst", "intern",
    "associate", "lead", "director", "coordinator",
]

QUANTIFIABLE_RE = re.compile(r"\d+%|\$\d+|\d+x|\d+\+")
EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"\+?\(?\d[\d\s\-().]{8,}\d")
EXPLICIT_YEARS_RE = re.compile(r"\b(\d{1,2})\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
CALENDAR_YEAR_RE = re.compile(r"\b(19[5-9]\d|20\d{2})\b")
COMPANY_RE = re.compile(
    r"\b(?:[A-Z][A-Za-z0-9&\-]*\s+){0,3}(?:Inc|Corp|Corporation|LLC|Ltd|Technologies|Labs)\b\.?"
)
INSTITUTION_RE = re.compile(
    r"\b(?:(?:University|College|Institute) of(?: [A-Z][A-Za-z]+)+"
    r"|(?:[A-Z][A-Za-z]+ ){1,3}(?:University|College|Institute))"
)
DEGREE_PATTERNS = [
    re.compile(r"\bbachelor(?:'s)?(?: of| in)? (?:science|arts|engineering)\b", re.IGNORECASE),
    re.compile(r"\bmaster(?:'s)?(?: of| in)? (?:science|arts|business administration|business)\b", re.IGNORECASE),
    re.compile(r"(?<![A-Za-z])(?:B\.S\.|B\.A\.|M\.S\.|M\.A\.|MBA\b|Ph\.?D\b)"),
]
MAX_YEARS = 50


def _term_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<![A-Za-z0-9])" + re.escape(term) + r"(?![A-Za-z0-9])", re.IGNORECASE)


_TECHNICAL_PATTERNS = [(skill, _term_pattern(skill)) for skill in TECHNICAL_SKILLS]
_PRODUCT_PATTERNS = [(skill, _term_pattern(skill)) for skill in PRODUCT_SKILLS]
_ROLE_PATTERNS = [
    re.compile(r"\b(?:[A-Za-z]+ )?" + role + r"\b", re.IGNORECASE) for role in ROLE_KEYWORDS
]


def _unique(items: List[str], limit: Optional[int] = None) -> List[str]:
    seen = set()
    result = []
    for item in items:
        item = item.strip()
        key = item.lower()
        if item and key not in seen:
            seen.add(key)
            result.append(item)
    return result[:limit] if limit else result


def extract_contact(text: str) -> ContactInfo:
    email = EMAIL_RE.search(text)
    phone = None
    for match in PHONE_RE.finditer(text):
        if len(re.sub(r"\D", "", match.group(0))) >= 10:
            phone = match.group(0).strip()
            break
    return ContactInfo(email=email.group(0) if email else None, phone=phone)


def extract_skills(text: str) -> SkillsSummary:
    technical = [skill for skill, pattern in _TECHNICAL_PATTERNS if pattern.search(text)]
    product = [skill for skill, pattern in _PRODUCT_PATTERNS if pattern.search(text)]
    return SkillsSummary(
        technical=technical,
        product=product,
        total_skills_count=len(technical) + len(product),
    )


def extract_experience_years(text: str) -> int:
    """
    Years of experience: the largest explicit "N years" mention, otherwise the
    span between the earliest and latest calendar years, otherwise 0.
    """
    explicit = [int(m) for m in EXPLICIT_YEARS_RE.findall(text)]
    if explicit:
        return min(max(explicit), MAX_YEARS)
    years = sorted({int(y) for y in CALENDAR_YEAR_RE.findall(text)})
    if len(years) < 2:
        return 0
    return min(years[-1] - years[0], MAX_YEARS)


def has_relevant_experience(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in RELEVANT_EXPERIENCE_KEYWORDS)


def has_quantifiable_results(text: str) -> bool:
    return QUANTIFIABLE_RE.search(text) is not None


def extract_roles(text: str) -> List[str]:
    roles = []
    for pattern in _ROLE_PATTERNS:
        roles.extend(m.group(0) for m in list(pattern.finditer(text))[:2])
    return _unique(roles, limit=10)


def extract_experience(text: str) -> ExperienceSummary:
    return ExperienceSummary(
        companies=_unique([m.group(0) for m in COMPANY_RE.finditer(text)], limit=5),
        roles=extract_roles(text),
        years_of_experience=extract_experience_years(text),
        has_relevant_experience=has_relevant_experience(text),
    )


def extract_education(text: str) -> EducationSummary:
    lowered = text.lower()
    degrees = []
    for pattern in DEGREE_PATTERNS:
        degrees.extend(m.group(0) for m in pattern.finditer(text))
    return EducationSummary(
        has_education=any(keyword in lowered for keyword in EDUCATION_KEYWORDS),
        institutions=_unique([m.group(0) for m in INSTITUTION_RE.finditer(text)], limit=3),
        degrees=_unique(degrees),
    )


def extract_achievements(text: str) -> AchievementsSummary:
    sentences = re.split(r"[.!?]+", text)
    achievements = [
        sentence.strip() for sentence in sentences
        if any(re.search(rf"\b{verb}\b", sentence, re.IGNORECASE) for verb in ACHIEVEMENT_VERBS)
    ]
    return AchievementsSummary(
        achievements=achievements[:5],
        has_quantifiable_results=has_quantifiable_results(text),
    )


class ResumeParser:
    """Derives structured resume fields from extracted text. Deterministic, never raises."""

    def parse(self, text: str) -> ParsedResume:
        text = re.sub(r"\s+", " ", text or "").strip()
        return ParsedResume(
            raw_text=text,
            contact=extract_contact(text),
            skills=extract_skills(text),
            experience=extract_experience(text),
            education=extract_education(text),
            achievements=extract_achievements(text),
        )
