import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests
from fastapi.concurrency import run_in_threadpool

from ..core import settings as default_settings, Settings
from .exceptions import EmailDeliveryError, ResumeValidationError

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_SUBJECT = "Your {company} APM Application Essay"
EXPORT_TYPES = ("copy", "download", "email")


def validate_email(email: Optional[str]) -> str:
    email = (email or "").strip()
    if not EMAIL_RE.match(email):
        raise ResumeValidationError("Invalid email address")
    return email


def require_essay(essay: Optional[str]) -> str:
    if not essay or not essay.strip():
        raise ResumeValidationError("Essay content is required")
    return essay


@dataclass
class EmailReceipt:
    recipient: str
    word_count: int
    sent_at: str
    simulated: bool
    message_id: Optional[str] = None


@dataclass
class ExportResult:
    message: str
    filename: Optional[str] = None
    content: Optional[str] = None
    email: Optional[EmailReceipt] = field(default=None)


class EmailService:
    """
    Sends the essay through an HTTP email API (Resend-compatible payload).

    Without EMAIL_SERVICE_API_KEY nothing leaves the process: the send is
    logged and reported back as simulated.
    """

    def __init__(self, settings: Settings = default_settings) -> None:
        self.settings = settings

    @property
    def configured(self) -> bool:
        return bool(self.settings.EMAIL_SERVICE_API_KEY)

    def _body(self, essay: str, name: Optional[str]) -> str:
        greeting = f"Hi {name}," if name else "Hi,"
        return (
            f"{greeting}\n\n"
            f"Here is your {self.settings.COMPANY_NAME} {self.settings.POSITION_TITLE} application essay:\n\n"
            f"{essay.strip()}\n\n"
            f"Word count: {len(essay.split())}\n\n"
            "Good luck with your application!\n"
            f"{self.settings.PROJECT_NAME}"
        )

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.settings.EMAIL_SERVICE_API_KEY}",
            "Content-Type": "application/json",
        }
        response = requests.post(
            self.settings.EMAIL_API_URL,
            headers=headers,
            json=payload,
            timeout=self.settings.EMAIL_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            return {}

    async def send(self, recipient: Optional[str], essay: Optional[str], name: Optional[str] = None) -> EmailReceipt:
        recipient = validate_email(recipient)
        essay = require_essay(essay)
        word_count = len(essay.split())
        sent_at = datetime.now(timezone.utc).isoformat()

        if not self.configured:
            logger.info(f"Email service not configured, simulating send to {recipient} ({word_count} words)")
            return EmailReceipt(recipient=recipient, word_count=word_count, sent_at=sent_at, simulated=True)

        payload = {
            "from": self.settings.EMAIL_FROM,
            "to": [recipient],
            "subject": EMAIL_SUBJECT.format(company=self.settings.COMPANY_NAME),
            "text": self._body(essay, name),
        }
        try:
            data = await run_in_threadpool(self._post, payload)
        except requests.RequestException as e:
            logger.error(f"Email delivery to {recipient} failed: {e}")
            raise EmailDeliveryError(recipient=recipient, original_error=str(e)) from e

        logger.info(f"Essay emailed to {recipient} ({word_count} words)")
        return EmailReceipt(
            recipient=recipient,
            word_count=word_count,
            sent_at=sent_at,
            simulated=False,
            message_id=data.get("id"),
        )


class ExportService:
    """Copy, download and email exports of a finished essay."""

    def __init__(self, email_service: EmailService) -> None:
        self.email_service = email_service

    @staticmethod
    def download_filename(now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"apm_essay_{int(now.timestamp() * 1000)}.txt"

    async def export(
        self,
        export_type: Optional[str],
        essay: Optional[str],
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> ExportResult:
        essay = require_essay(essay)
        match export_type:
            case "copy":
                return ExportResult(message="Essay ready to copy to clipboard", content=essay)
            case "download":
                return ExportResult(
                    message="Essay ready for download",
                    filename=self.download_filename(),
                    content=essay,
                )
            case "email":
                if not email:
                    raise ResumeValidationError("Email address is required for email export")
                receipt = await self.email_service.send(email, essay, name)
                message = "Email sent successfully"
                if receipt.simulated:
                    message = "Email sent successfully (simulated)"
                return ExportResult(message=message, email=receipt)
            case _:
                raise ResumeValidationError(
                    f"Invalid export type. Use one of: {', '.join(EXPORT_TYPES)}"
                )
