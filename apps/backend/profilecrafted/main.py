import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .agent import AgentManager
from .api import api_router
from .core import settings as default_settings, setup_logging, Settings
from .core.exceptions import register_exception_handlers
from .core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from .services import (
    DocumentTextExtractor,
    EmailService,
    EssayService,
    ExportService,
    RateLimiter,
    ResumeParser,
    RubricScorer,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    agent_manager: Optional[AgentManager] = None,
    rate_limiter: Optional[RateLimiter] = None,
    email_service: Optional[EmailService] = None,
) -> FastAPI:
    """
    Build the application. Services are constructed once here and exposed on
    `app.state`; route handlers reach them through api.dependencies.
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    agent_manager = agent_manager or AgentManager.from_settings(settings)
    email_service = email_service or EmailService(settings)

    app.state.settings = settings
    app.state.agent_manager = agent_manager
    app.state.extractor = DocumentTextExtractor()
    app.state.parser = ResumeParser()
    app.state.scorer = RubricScorer()
    app.state.essay_service = EssayService(agent_manager, settings)
    app.state.email_service = email_service
    app.state.export_service = ExportService(email_service)
    app.state.rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )

    register_exception_handlers(app, settings)
    app.include_router(api_router)

    logger.info(
        f"{settings.PROJECT_NAME} {settings.VERSION} ready ({settings.ENVIRONMENT}), "
        f"providers: {agent_manager.provider_names or 'none'}"
    )
    return app


app = create_app()
