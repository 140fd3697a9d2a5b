import io
import textwrap
import zipfile
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient

from profilecrafted.agent import AgentManager
from profilecrafted.core import Settings
from profilecrafted.main import create_app
from profilecrafted.services import RateLimiter, ResumeParser, RubricScorer

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

RICH_RESUME = (
    "Alex Rivera. alex.rivera@example.com | (415) 555-0134. "
    "Product Manager with 2 years of experience building software products at Acme Technologies Inc. "
    "Associate Product Manager, Acme Technologies Inc, 2021 - 2023. "
    "Owned the product roadmap and product strategy for a growth team and led a team of 5 engineers in agile scrum sprints. "
    "Increased activation by 25% through A/B testing, user research and analytics on KPI dashboards. "
    "Built Python and SQL pipelines on AWS cloud database infrastructure with git, REST API integrations "
    "and JavaScript dashboards, improving engineering development velocity through coding and programming reviews. "
    "Launched a machine learning prototype at a hackathon. Writes a blog on product innovation, creative experiment "
    "design, market research and continuous learning, and enjoys speaking at a conference. "
    "Delivered a presentation and documentation to stakeholders, mentoring junior analysts and teaching workshops, "
    "with cross-functional collaboration and communication with design. "
    "Coordinate and organize project management, mentored interns, collaborated with sales, volunteer lead for a "
    "coding club, manage team rituals. "
    "Education: Bachelor of Science in Computer Science, Stanford University."
)

KEYWORD_FREE_RESUME = (
    "Jordan Smith. Enjoys baking bread on weekends and walking dogs in the park. "
    "Has a fondness for old films, quiet mornings and tending a small flower bed near the house. "
    "Reads novels often."
)


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(text: str) -> bytes:
    """Single-page PDF with Helvetica text and a correct xref table."""
    lines = textwrap.wrap(text, 80, break_on_hyphens=False) or [""]
    ops = ["BT", "/F1 10 Tf", "12 TL", "50 760 Td"]
    ops.extend(f"({_pdf_escape(line)} ) Tj T*" for line in lines)
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


def build_docx(paragraphs: List[str]) -> bytes:
    """Minimal WordprocessingML package with one run per paragraph."""
    body = "".join(
        f"<w:p><w:r><w:t xml:space=\"preserve\">{p}</w:t></w:r></w:p>" for p in paragraphs
    )
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )
    content_types = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
        "</Types>"
    )
    rels = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        '<Relationship Id="rId1" '
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
        'Target="word/document.xml"/>'
        "</Relationships>"
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", content_types)
        archive.writestr("_rels/.rels", rels)
        archive.writestr("word/document.xml", document)
    return buffer.getvalue()


@pytest.fixture
def rich_resume_text() -> str:
    return RICH_RESUME


@pytest.fixture
def keyword_free_resume_text() -> str:
    return KEYWORD_FREE_RESUME


@pytest.fixture
def make_pdf() -> Callable[[str], bytes]:
    return build_pdf


@pytest.fixture
def make_docx() -> Callable[[List[str]], bytes]:
    return build_docx


@pytest.fixture
def parser() -> ResumeParser:
    return ResumeParser()


@pytest.fixture
def scorer() -> RubricScorer:
    return RubricScorer()


@pytest.fixture
def rich_scorecard(parser, scorer, rich_resume_text):
    return scorer.score(parser.parse(rich_resume_text))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        LLM_PROVIDER=None,
        FALLBACK_LLM_PROVIDER=None,
        EMAIL_SERVICE_API_KEY=None,
        RATE_LIMIT_MAX_REQUESTS=50,
    )


@pytest.fixture
def offline_agent_manager() -> AgentManager:
    """No providers configured, so every generation falls back to the template."""
    return AgentManager(providers=[])


@pytest.fixture
def app(test_settings, offline_agent_manager):
    return create_app(settings=test_settings, agent_manager=offline_agent_manager)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def limited_client(test_settings, offline_agent_manager) -> TestClient:
    """Client whose rate limiter allows only two requests per window."""
    app = create_app(
        settings=test_settings,
        agent_manager=offline_agent_manager,
        rate_limiter=RateLimiter(max_requests=2, window_seconds=60),
    )
    with TestClient(app) as test_client:
        yield test_client
