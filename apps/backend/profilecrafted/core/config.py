import logging
import os
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "ProfileCrafted"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    # Primary LLM provider. Either "ollama" or a fully-qualified
    # llama_index LLM class, e.g. llama_index.llms.openai.OpenAI
    LLM_PROVIDER: Optional[str] = "llama_index.llms.openai.OpenAI"
    LL_MODEL: Optional[str] = "gpt-4o-mini"
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: Optional[str] = None

    # Tried when the primary provider fails. Empty disables it.
    FALLBACK_LLM_PROVIDER: Optional[str] = "llama_index.llms.anthropic.Anthropic"
    FALLBACK_LL_MODEL: Optional[str] = "claude-3-5-sonnet-latest"
    FALLBACK_LLM_API_KEY: Optional[str] = None
    FALLBACK_LLM_BASE_URL: Optional[str] = None

    LLM_TEMPERATURE: float = 0.7
    LLM_REGENERATION_TEMPERATURE: float = 0.8
    LLM_MAX_TOKENS: int = 800
    LLM_TIMEOUT_SECONDS: float = 30.0

    ESSAY_TARGET_WORDS: int = 400
    COMPANY_NAME: str = "Perplexity"
    POSITION_TITLE: str = "Associate Product Manager"

    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    RATE_LIMIT_MAX_REQUESTS: int = 50
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    EMAIL_SERVICE_API_KEY: Optional[str] = None
    EMAIL_API_URL: str = "https://api.resend.com/emails"
    EMAIL_FROM: str = "noreply@profilecrafted.com"
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), os.pardir, os.pardir, ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
