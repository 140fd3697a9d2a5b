import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from ..core import settings as default_settings, Settings
from .exceptions import ProviderError, GenerationUnavailableError
from .providers.base import Provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """One entry of the provider chain."""
    provider: str
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None


class AgentManager:
    """
    Runs a prompt against an ordered chain of LLM providers.

    Providers are tried in order; any failure (construction, timeout, error
    response, empty text) moves on to the next one. When the chain is
    exhausted GenerationUnavailableError is raised so the caller can fall
    back to deterministic generation.
    """

    def __init__(self,
                 providers: Optional[List[ProviderConfig]] = None,
                 max_tokens: int = default_settings.LLM_MAX_TOKENS,
                 timeout: float = default_settings.LLM_TIMEOUT_SECONDS
                 ) -> None:
        self.providers = list(providers or [])
        self.max_tokens = max_tokens
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "AgentManager":
        chain = []
        if settings.LLM_PROVIDER:
            chain.append(ProviderConfig(provider=settings.LLM_PROVIDER,
                                        model=settings.LL_MODEL,
                                        api_key=settings.LLM_API_KEY,
                                        base_url=settings.LLM_BASE_URL))
        if settings.FALLBACK_LLM_PROVIDER:
            chain.append(ProviderConfig(provider=settings.FALLBACK_LLM_PROVIDER,
                                        model=settings.FALLBACK_LL_MODEL,
                                        api_key=settings.FALLBACK_LLM_API_KEY,
                                        base_url=settings.FALLBACK_LLM_BASE_URL))
        return cls(providers=chain,
                   max_tokens=settings.LLM_MAX_TOKENS,
                   timeout=settings.LLM_TIMEOUT_SECONDS)

    @property
    def provider_names(self) -> List[str]:
        return [p.provider for p in self.providers]

    async def _get_provider(self, config: ProviderConfig, **kwargs: Any) -> Provider:
        opts: Dict[str, Any] = {
            "temperature": default_settings.LLM_TEMPERATURE,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
        }
        opts.update(kwargs)
        match config.provider:
            case 'ollama':
                from .providers.ollama import OllamaProvider
                return await run_in_threadpool(OllamaProvider,
                                             model_name=config.model,
                                             api_base_url=config.base_url,
                                             opts=opts)
            case _:
                from .providers.llama_index import LlamaIndexProvider
                return await run_in_threadpool(LlamaIndexProvider,
                                             api_key=config.api_key,
                                             model_name=config.model,
                                             api_base_url=config.base_url,
                                             provider=config.provider,
                                             opts=opts)

    async def _generate(self, config: ProviderConfig, prompt: str, system: Optional[str], **kwargs: Any) -> str:
        try:
            provider = await self._get_provider(config, **kwargs)
        except ProviderError:
            raise
        except Exception as e:
            # missing integration packages and absent API keys land here
            raise ProviderError(f"{config.provider} - could not be initialised: {e}") from e
        return await provider(prompt, system=system)

    async def _attempt(self, config: ProviderConfig, prompt: str, system: Optional[str], **kwargs: Any) -> str:
        # the bound covers construction too; an Ollama model pull happens there
        try:
            return await asyncio.wait_for(self._generate(config, prompt, system, **kwargs), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"{config.provider} - timed out after {self.timeout}s") from e

    async def run(self, prompt: str, system: Optional[str] = None, **kwargs: Any) -> Tuple[str, str]:
        """
        Run the prompt through the provider chain.

        Returns the generated text and the name of the provider that produced it.
        """
        attempts = []
        for config in self.providers:
            try:
                text = await self._attempt(config, prompt, system, **kwargs)
            except ProviderError as e:
                logger.error(f"Provider {config.provider} failed: {e}")
                attempts.append(f"{config.provider}: {e}")
                continue
            logger.info(f"Provider {config.provider} generated {len(text.split())} words")
            return text, config.provider

        if not self.providers:
            logger.warning("No LLM providers configured")
        raise GenerationUnavailableError(attempts=attempts)
