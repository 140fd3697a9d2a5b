"""
Unit tests for EmailService and ExportService.

The HTTP email API is never contacted: requests.post is patched.
"""

from datetime import datetime, timezone

import pytest
import requests
from unittest.mock import MagicMock, patch

from profilecrafted.core import Settings
from profilecrafted.services.delivery_service import EmailService, ExportService
from profilecrafted.services.exceptions import EmailDeliveryError, ResumeValidationError

ESSAY = "I build products people love. " * 20


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        EMAIL_SERVICE_API_KEY="re_test_key",
        EMAIL_API_URL="https://email.example.com/emails",
        EMAIL_FROM="essays@example.com",
    )


class TestEmailService:
    """Tests for EmailService.send."""

    @pytest.mark.asyncio
    async def test_simulated_without_api_key(self):
        """No key configured means no HTTP call and a simulated receipt."""
        service = EmailService(Settings(ENVIRONMENT="test", EMAIL_SERVICE_API_KEY=None))
        with patch("profilecrafted.services.delivery_service.requests.post") as post:
            receipt = await service.send("sam@example.com", ESSAY)

        post.assert_not_called()
        assert receipt.simulated is True
        assert receipt.recipient == "sam@example.com"
        assert receipt.word_count == 100

    @pytest.mark.asyncio
    async def test_sends_through_http_api(self, configured_settings):
        response = MagicMock()
        response.json.return_value = {"id": "msg_123"}
        service = EmailService(configured_settings)

        with patch("profilecrafted.services.delivery_service.requests.post", return_value=response) as post:
            receipt = await service.send("sam@example.com", ESSAY, name="Sam")

        assert receipt.simulated is False
        assert receipt.message_id == "msg_123"
        args, kwargs = post.call_args
        assert args[0] == "https://email.example.com/emails"
        assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
        assert kwargs["json"]["to"] == ["sam@example.com"]
        assert kwargs["json"]["from"] == "essays@example.com"
        assert kwargs["json"]["text"].startswith("Hi Sam,")
        assert ESSAY.strip() in kwargs["json"]["text"]

    @pytest.mark.asyncio
    async def test_http_failure_raises_delivery_error(self, configured_settings):
        service = EmailService(configured_settings)
        failure = requests.ConnectionError("connection refused")

        with patch("profilecrafted.services.delivery_service.requests.post", side_effect=failure):
            with pytest.raises(EmailDeliveryError) as exc_info:
                await service.send("sam@example.com", ESSAY)

        assert exc_info.value.recipient == "sam@example.com"
        assert "connection refused" in exc_info.value.original_error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", "two words@example.com"])
    async def test_invalid_email_is_rejected(self, email):
        service = EmailService(Settings(ENVIRONMENT="test"))
        with pytest.raises(ResumeValidationError, match="Invalid email address"):
            await service.send(email, ESSAY)

    @pytest.mark.asyncio
    async def test_empty_essay_is_rejected(self):
        service = EmailService(Settings(ENVIRONMENT="test"))
        with pytest.raises(ResumeValidationError, match="Essay content is required"):
            await service.send("sam@example.com", "   ")


class TestExportService:
    """Tests for ExportService.export."""

    @pytest.fixture
    def service(self) -> ExportService:
        return ExportService(EmailService(Settings(ENVIRONMENT="test", EMAIL_SERVICE_API_KEY=None)))

    @pytest.mark.asyncio
    async def test_copy(self, service):
        result = await service.export("copy", ESSAY)
        assert result.content == ESSAY
        assert result.filename is None

    @pytest.mark.asyncio
    async def test_download_has_timestamped_filename(self, service):
        result = await service.export("download", ESSAY)
        assert result.filename.startswith("apm_essay_")
        assert result.filename.endswith(".txt")
        assert result.content == ESSAY

    def test_download_filename_uses_milliseconds(self):
        moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert ExportService.download_filename(moment) == "apm_essay_1704164645000.txt"

    @pytest.mark.asyncio
    async def test_email_export_delegates_to_email_service(self, service):
        result = await service.export("email", ESSAY, email="sam@example.com")
        assert result.email.simulated is True
        assert "simulated" in result.message

    @pytest.mark.asyncio
    async def test_email_export_requires_address(self, service):
        with pytest.raises(ResumeValidationError, match="Email address is required"):
            await service.export("email", ESSAY)

    @pytest.mark.asyncio
    async def test_unknown_export_type(self, service):
        with pytest.raises(ResumeValidationError, match="Invalid export type"):
            await service.export("fax", ESSAY)
