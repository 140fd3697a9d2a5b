import logging

from fastapi import APIRouter, Depends

from ...schemas.pydantic import EmailRequest, EmailResponse, ExportRequest, ExportResponse
from ...services import EmailService, ExportService
from ..dependencies import enforce_rate_limit, get_email_service, get_export_service

logger = logging.getLogger(__name__)

delivery_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@delivery_router.post("/export", response_model=ExportResponse, summary="Copy, download or email an essay")
async def export_essay(
    payload: ExportRequest,
    export_service: ExportService = Depends(get_export_service),
) -> ExportResponse:
    result = await export_service.export(
        payload.export_type,
        payload.essay,
        email=payload.email,
        name=payload.name,
    )
    return ExportResponse(message=result.message, filename=result.filename, content=result.content)


@delivery_router.post("/send-email", response_model=EmailResponse, summary="Email an essay")
async def send_email(
    payload: EmailRequest,
    email_service: EmailService = Depends(get_email_service),
) -> EmailResponse:
    receipt = await email_service.send(payload.email, payload.essay, payload.name)
    message = "Email sent successfully"
    if receipt.simulated:
        message = "Email sent successfully (simulated; email service not configured)"
    return EmailResponse(
        message=message,
        recipient=receipt.recipient,
        word_count=receipt.word_count,
        sent_at=receipt.sent_at,
        simulated=receipt.simulated,
    )
