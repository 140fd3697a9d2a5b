import logging
import ollama
from ollama._types import ResponseError as OllamaResponseError

from typing import Any, Dict, Optional
from fastapi.concurrency import run_in_threadpool

from ..exceptions import ProviderError
from .base import Provider
from ...core import settings

logger = logging.getLogger(__name__)


class OllamaProvider(Provider):
    """Ollama LLM provider for essay generation."""

    name = "ollama"

    def __init__(
        self,
        model_name: str = settings.LL_MODEL,
        api_base_url: Optional[str] = settings.LLM_BASE_URL,
        opts: Optional[Dict[str, Any]] = None
    ):
        self.opts = opts or {}
        self.model = model_name
        client_kwargs: Dict[str, Any] = {}
        if self.opts.get("timeout") is not None:
            client_kwargs["timeout"] = self.opts["timeout"]
        self._client = ollama.Client(host=api_base_url, **client_kwargs) if api_base_url else ollama.Client(**client_kwargs)
        self._ensure_model(model_name)

    def _is_installed(self, model_name: str) -> bool:
        try:
            tags = [m.model for m in self._client.list().models]
        except Exception as e:
            logger.warning(f"Could not list models on the Ollama host: {e}")
            return False
        # a bare name matches any of its tags, e.g. llama3 -> llama3:latest
        return any(tag == model_name or tag.startswith(f"{model_name}:") for tag in tags)

    def _ensure_model(self, model_name: str) -> None:
        """Pull `model_name` unless the Ollama host already has it."""
        if self._is_installed(model_name):
            return
        logger.info(f"Model {model_name} not on the Ollama host, pulling it")
        try:
            self._client.pull(model_name)
        except Exception as e:
            message = f"Ollama cannot serve {model_name} ({e}); run `ollama pull {model_name}` on the host"
            logger.error(message)
            raise ProviderError(message) from e

    def _options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self.opts.get("temperature") is not None:
            options["temperature"] = self.opts["temperature"]
        if self.opts.get("max_tokens") is not None:
            options["num_predict"] = self.opts["max_tokens"]
        return options

    def _generate_sync(self, prompt: str, system: Optional[str]) -> str:
        try:
            kwargs: Dict[str, Any] = {
                "prompt": prompt,
                "model": self.model,
                "options": self._options(),
            }
            if system:
                kwargs["system"] = system
            response = self._client.generate(**kwargs)
            text = (response["response"] or "").strip()
        except OllamaResponseError as e:
            logger.error(f"Ollama returned HTTP {e.status_code} for {self.model}: {e}")
            raise ProviderError(f"Ollama - {self.model} failed: {e}") from e
        except Exception as e:
            logger.error(f"Ollama request for {self.model} failed: {e}")
            raise ProviderError(f"Ollama - {self.model} failed: {e}") from e
        if not text:
            raise ProviderError(f"Ollama - model '{self.model}' returned an empty response")
        return text

    async def __call__(self, prompt: str, system: Optional[str] = None, **generation_args: Any) -> str:
        if generation_args:
            logger.warning(f"Unsupported generation args for Ollama: {sorted(generation_args)}")
        return await run_in_threadpool(self._generate_sync, prompt, system)
