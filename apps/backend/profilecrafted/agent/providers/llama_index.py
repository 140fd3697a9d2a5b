"""
Essay generation through LlamaIndex LLM classes

Hosted LLMs (OpenAI, Anthropic, OpenAI-compatible endpoints, ...) are reached
through LlamaIndex's LLM classes. The provider string is the fully-qualified
class name, for example:

    llama_index.llms.openai.OpenAI
    llama_index.llms.anthropic.Anthropic

Only the kwargs every integration accepts are passed to the constructor:
model, api_key, base_url, temperature and max_tokens. Integrations that still
expect `model_name` are retried with that spelling.
"""

import logging
from importlib import import_module

from typing import Any, Dict, List, Optional
from fastapi.concurrency import run_in_threadpool
from llama_index.core.base.llms.base import BaseLLM
from llama_index.core.llms import ChatMessage, MessageRole

from ..exceptions import ProviderError
from .base import Provider
from ...core import settings

logger = logging.getLogger(__name__)


def _get_real_provider(provider_name):
    """Resolve a dotted class path to `(class, module name, class name)`."""
    if not isinstance(provider_name, str):
        raise ValueError(f"LLM class path must be a string, got {type(provider_name).__name__}")
    modname, _, classname = provider_name.rpartition(".")
    if not modname:
        raise ValueError(f"LLM class path {provider_name!r} is not fully qualified")
    module = import_module(modname)
    return getattr(module, classname), modname, classname


class LlamaIndexProvider(Provider):
    def __init__(self,
                 api_key: Optional[str] = settings.LLM_API_KEY,
                 api_base_url: Optional[str] = settings.LLM_BASE_URL,
                 model_name: Optional[str] = settings.LL_MODEL,
                 provider: Optional[str] = settings.LLM_PROVIDER,
                 opts: Optional[Dict[str, Any]] = None):
        if not provider:
            raise ValueError("An LLM class path is required")
        self.opts = opts or {}
        self._model = model_name
        llm_cls, self._modname, self._classname = _get_real_provider(provider)
        if not issubclass(llm_cls, BaseLLM):
            raise TypeError(f"{provider} is not a llama_index LLM class")
        self.name = self._classname

        llm_kwargs: Dict[str, Any] = {"model": model_name, "api_key": api_key}
        if api_base_url:
            llm_kwargs["base_url"] = api_base_url
        for key in ("temperature", "max_tokens"):
            if self.opts.get(key) is not None:
                llm_kwargs[key] = self.opts[key]
        self._client = self._build(llm_cls, llm_kwargs)

    @staticmethod
    def _build(llm_cls, llm_kwargs: Dict[str, Any]) -> BaseLLM:
        try:
            return llm_cls(**llm_kwargs)
        except TypeError as e:
            if "model" not in str(e) and "unexpected keyword argument" not in str(e):
                raise
        # older integrations name the field model_name
        legacy = dict(llm_kwargs)
        legacy["model_name"] = legacy.pop("model", None)
        return llm_cls(**legacy)

    @staticmethod
    def _messages(prompt: str, system: Optional[str]) -> List[ChatMessage]:
        messages = []
        if system:
            messages.append(ChatMessage(role=MessageRole.SYSTEM, content=system))
        messages.append(ChatMessage(role=MessageRole.USER, content=prompt))
        return messages

    def _generate_sync(self, prompt: str, system: Optional[str] = None) -> str:
        """
        Generate a response from the model. A system instruction goes through
        the chat API, a bare prompt through completion.
        """
        try:
            if system:
                response = self._client.chat(self._messages(prompt, system))
                text = response.message.content
            else:
                text = self._client.complete(prompt).text
        except Exception as e:
            logger.error(f"{self._classname} generation failed: {e}")
            raise ProviderError(f"llama_index - {self._classname} failed: {e}") from e
        if not text or not text.strip():
            raise ProviderError(f"llama_index - {self._classname} returned an empty response")
        return text.strip()

    async def __call__(self, prompt: str, system: Optional[str] = None, **generation_args: Any) -> str:
        if generation_args:
            logger.warning(f"Unsupported generation args for {self._classname}: {sorted(generation_args)}")
        return await run_in_threadpool(self._generate_sync, prompt, system)
