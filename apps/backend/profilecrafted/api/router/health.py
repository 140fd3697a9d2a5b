import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ...schemas.pydantic import HealthResponse, StatusResponse

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/health", response_model=HealthResponse, summary="Service health")
async def health_check(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    agent_manager = request.app.state.agent_manager
    ai_status = "configured" if agent_manager.provider_names else "fallback-only"
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        environment=settings.ENVIRONMENT,
        services={"api": "operational", "ai": ai_status},
        version=settings.VERSION,
    )


@health_router.get("/status", response_model=StatusResponse, summary="Readiness and configuration report")
async def readiness(request: Request) -> StatusResponse:
    settings = request.app.state.settings
    ai_configured = bool(request.app.state.agent_manager.provider_names)
    email_configured = request.app.state.email_service.configured

    issues = []
    if not ai_configured:
        issues.append("No AI providers configured")
    if not email_configured:
        issues.append("Email service not configured")

    return StatusResponse(
        ready=not issues,
        issues=issues,
        config={
            "environment": settings.ENVIRONMENT,
            "isProduction": settings.is_production,
            "services": {"ai": ai_configured, "email": email_configured},
            "security": {
                "corsConfigured": bool(settings.ALLOWED_ORIGINS),
                "rateLimitingEnabled": True,
            },
        },
    )
