import html
import io
import logging
import re
import zipfile
from typing import Callable, List, Optional, Tuple

import docx2txt
from pypdf import PdfReader

from .exceptions import ExtractionFailedError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = (PDF_MIME_TYPE, DOCX_MIME_TYPE)

MIN_TEXT_LENGTH = 50

_PAREN_TOKEN_RE = re.compile(r"\(((?:[^()\\]|\\.){3,})\)", re.DOTALL)
_STREAM_RE = re.compile(r"stream\s*(.*?)\s*endstream", re.DOTALL)
_READABLE_RUN_RE = re.compile(r"[A-Za-z][A-Za-z0-9 .,!?;:'\"()\-@]{8,}")
_DOCX_RUN_RE = re.compile(r"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_PDF_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "(": "(", ")": ")", "\\": "\\"}

_TYPOGRAPHY = str.maketrans({
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u2013": "-",
    "\u2014": "-",
    "\u00a0": " ",
    "\u2022": " ",
    "\u25cf": " ",
    "\u25aa": " ",
})


def clean_text(text: str) -> str:
    """Normalize smart punctuation, drop control bytes and collapse whitespace."""
    if not text:
        return ""
    text = text.translate(_TYPOGRAPHY)
    text = _CONTROL_CHARS_RE.sub("", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def _unescape_pdf_string(token: str) -> str:
    return re.sub(r"\\(.)", lambda m: _PDF_ESCAPES.get(m.group(1), m.group(1)), token)


def _has_enough_text(text: Optional[str]) -> bool:
    return len(clean_text(text or "")) >= MIN_TEXT_LENGTH


class DocumentTextExtractor:
    """
    Turns an uploaded PDF or DOCX buffer into plain text.

    Each format has an ordered list of strategies. The first strategy whose
    cleaned output reaches MIN_TEXT_LENGTH characters wins; strategy errors are
    logged and skipped. If nothing usable comes out, ExtractionFailedError is
    raised with a message that can be shown to the user.
    """

    def __init__(self) -> None:
        self._strategies = {
            PDF_MIME_TYPE: [
                ("pypdf", self._pdf_with_pypdf),
                ("pdf-regex", self._pdf_with_regex),
            ],
            DOCX_MIME_TYPE: [
                ("docx2txt", self._docx_with_docx2txt),
                ("docx-xml", self._docx_with_xml_scan),
            ],
        }

    @staticmethod
    def is_supported(content_type: Optional[str]) -> bool:
        return (content_type or "").split(";")[0].strip().lower() in ALLOWED_MIME_TYPES

    def extract(self, content: bytes, content_type: str) -> str:
        mime = (content_type or "").split(";")[0].strip().lower()
        if mime not in self._strategies:
            raise UnsupportedFormatError(content_type=content_type)

        text, method = self._run_strategies(content, self._strategies[mime])
        cleaned = clean_text(text)
        if len(cleaned) < MIN_TEXT_LENGTH:
            logger.warning(f"Insufficient text extracted from {mime}: {len(cleaned)} characters")
            raise ExtractionFailedError(extracted_length=len(cleaned))

        logger.info(
            f"Extracted {len(cleaned)} characters ({len(cleaned.split())} words) "
            f"from {mime} using {method}"
        )
        return cleaned

    def _run_strategies(
        self,
        content: bytes,
        strategies: List[Tuple[str, Callable[[bytes], str]]],
    ) -> Tuple[str, Optional[str]]:
        for name, strategy in strategies:
            try:
                text = strategy(content)
            except Exception as e:
                logger.warning(f"Extraction strategy {name} failed: {e}")
                continue
            if _has_enough_text(text):
                return text, name
            logger.info(f"Extraction strategy {name} produced insufficient text, trying next")
        return "", None

    @staticmethod
    def _pdf_with_pypdf(content: bytes) -> str:
        reader = PdfReader(io.BytesIO(content))
        text_content = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                text_content.append(text)
        return "\n".join(text_content)

    @staticmethod
    def _pdf_with_regex(content: bytes) -> str:
        """
        Scan the raw PDF bytes for string operands and readable runs inside
        uncompressed content streams.
        """
        raw = content.decode("latin-1")
        pieces = []
        for match in _PAREN_TOKEN_RE.finditer(raw):
            token = _unescape_pdf_string(match.group(1)).strip()
            if len(token) > 2 and re.search(r"[A-Za-z]", token):
                pieces.append(token)

        for stream in _STREAM_RE.finditer(raw):
            for chunk in _READABLE_RUN_RE.findall(stream.group(1)):
                chunk = chunk.strip()
                # skip runs already captured as string operands
                if "(" in chunk or ")" in chunk:
                    continue
                if len(chunk) > 8 and re.search(r"[A-Za-z].*[A-Za-z]", chunk):
                    pieces.append(chunk)
        return " ".join(pieces)

    @staticmethod
    def _docx_with_docx2txt(content: bytes) -> str:
        return docx2txt.process(io.BytesIO(content)) or ""

    @staticmethod
    def _docx_with_xml_scan(content: bytes) -> str:
        """Collect <w:t> text runs from document.xml, or from the raw buffer if it is not a zip."""
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                xml = archive.read("word/document.xml").decode("utf-8", errors="ignore")
        except (zipfile.BadZipFile, KeyError):
            xml = content.decode("utf-8", errors="ignore")
        runs = [html.unescape(run) for run in _DOCX_RUN_RE.findall(xml)]
        return " ".join(run for run in runs if run.strip())
