"""
Tests for the AgentManager provider chain.

These tests verify:
1. The chain is built from settings in primary, fallback order
2. The first provider that answers wins
3. Construction errors, provider errors and timeouts move on to the next provider
4. An exhausted chain raises GenerationUnavailableError
"""

import asyncio
import time

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from profilecrafted.agent import AgentManager, GenerationUnavailableError, ProviderConfig, ProviderError
from profilecrafted.core import Settings


def _chain():
    return [
        ProviderConfig(provider="llama_index.llms.openai.OpenAI", model="gpt-4o-mini", api_key="sk-test"),
        ProviderConfig(provider="llama_index.llms.anthropic.Anthropic", model="claude", api_key="ant-test"),
    ]


class TestAgentManager:
    """Tests for AgentManager.run."""

    def test_from_settings_orders_primary_then_fallback(self):
        settings = Settings(
            ENVIRONMENT="test",
            LLM_PROVIDER="ollama",
            LL_MODEL="llama3",
            FALLBACK_LLM_PROVIDER="llama_index.llms.anthropic.Anthropic",
            LLM_TIMEOUT_SECONDS=12,
        )
        manager = AgentManager.from_settings(settings)

        assert manager.provider_names == ["ollama", "llama_index.llms.anthropic.Anthropic"]
        assert manager.providers[0].model == "llama3"
        assert manager.timeout == 12

    def test_from_settings_skips_disabled_fallback(self):
        settings = Settings(ENVIRONMENT="test", LLM_PROVIDER="ollama", FALLBACK_LLM_PROVIDER=None)
        assert AgentManager.from_settings(settings).provider_names == ["ollama"]

    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        primary = AsyncMock(return_value="Essay from the primary provider")
        fallback = AsyncMock(return_value="Essay from the fallback provider")
        manager = AgentManager(providers=_chain())

        with patch.object(AgentManager, "_get_provider", new=AsyncMock(side_effect=[primary, fallback])):
            text, provider = await manager.run("prompt", system="system")

        assert text == "Essay from the primary provider"
        assert provider == "llama_index.llms.openai.OpenAI"
        primary.assert_awaited_once_with("prompt", system="system")
        fallback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provider_error_falls_through(self):
        """A failing primary hands over to the fallback provider."""
        primary = AsyncMock(side_effect=ProviderError("quota exceeded"))
        fallback = AsyncMock(return_value="Fallback essay")
        manager = AgentManager(providers=_chain())

        with patch.object(AgentManager, "_get_provider", new=AsyncMock(side_effect=[primary, fallback])):
            text, provider = await manager.run("prompt")

        assert text == "Fallback essay"
        assert provider == "llama_index.llms.anthropic.Anthropic"

    @pytest.mark.asyncio
    async def test_construction_error_falls_through(self):
        """A missing integration package is treated like any other provider failure."""
        fallback = AsyncMock(return_value="Fallback essay")
        manager = AgentManager(providers=_chain())
        get_provider = AsyncMock(side_effect=[ImportError("No module named 'llama_index.llms.openai'"), fallback])

        with patch.object(AgentManager, "_get_provider", new=get_provider):
            text, _ = await manager.run("prompt")

        assert text == "Fallback essay"

    @pytest.mark.asyncio
    async def test_timeout_falls_through(self):
        async def slow(prompt, system=None):
            await asyncio.sleep(5)
            return "too late"

        fallback = AsyncMock(return_value="Fast essay")
        manager = AgentManager(providers=_chain(), timeout=0.05)

        with patch.object(AgentManager, "_get_provider", new=AsyncMock(side_effect=[slow, fallback])):
            text, provider = await manager.run("prompt")

        assert text == "Fast essay"
        assert provider == "llama_index.llms.anthropic.Anthropic"

    @pytest.mark.asyncio
    async def test_slow_construction_falls_through_within_timeout(self):
        """A blocking model pull counts against the timeout and does not stall the loop."""
        def slow_ollama(**kwargs):
            time.sleep(0.5)
            return AsyncMock(return_value="too late")

        manager = AgentManager(
            providers=[ProviderConfig(provider="ollama", model="llama3"), _chain()[1]],
            timeout=0.05,
        )
        with patch("profilecrafted.agent.providers.ollama.OllamaProvider", side_effect=slow_ollama), \
                patch("profilecrafted.agent.providers.llama_index.LlamaIndexProvider",
                      return_value=AsyncMock(return_value="Fast essay")):
            started = time.monotonic()
            text, provider = await manager.run("prompt")
            elapsed = time.monotonic() - started

        assert text == "Fast essay"
        assert provider == "llama_index.llms.anthropic.Anthropic"
        assert elapsed < 0.4

    @pytest.mark.asyncio
    async def test_exhausted_chain_raises(self):
        failing = AsyncMock(side_effect=ProviderError("authentication failed"))
        manager = AgentManager(providers=_chain())

        with patch.object(AgentManager, "_get_provider", new=AsyncMock(return_value=failing)):
            with pytest.raises(GenerationUnavailableError) as exc_info:
                await manager.run("prompt")

        assert len(exc_info.value.attempts) == 2
        assert "authentication failed" in exc_info.value.attempts[0]

    @pytest.mark.asyncio
    async def test_empty_chain_raises(self):
        with pytest.raises(GenerationUnavailableError) as exc_info:
            await AgentManager(providers=[]).run("prompt")
        assert exc_info.value.attempts == []

    @pytest.mark.asyncio
    async def test_get_provider_builds_ollama_with_call_options(self):
        """Per-call kwargs such as temperature override the defaults."""
        manager = AgentManager(
            providers=[ProviderConfig(provider="ollama", model="llama3", base_url="http://ollama:11434")],
            max_tokens=600,
            timeout=20,
        )
        with patch("profilecrafted.agent.providers.ollama.OllamaProvider") as ollama_cls:
            ollama_cls.return_value = MagicMock()
            await manager._get_provider(manager.providers[0], temperature=0.8)

        ollama_cls.assert_called_once_with(
            model_name="llama3",
            api_base_url="http://ollama:11434",
            opts={"temperature": 0.8, "max_tokens": 600, "timeout": 20},
        )

    @pytest.mark.asyncio
    async def test_get_provider_builds_llama_index_for_class_names(self):
        manager = AgentManager(providers=_chain(), max_tokens=800, timeout=30)
        with patch("profilecrafted.agent.providers.llama_index.LlamaIndexProvider") as llama_cls:
            await manager._get_provider(manager.providers[1], temperature=0.7)

        _, kwargs = llama_cls.call_args
        assert kwargs["provider"] == "llama_index.llms.anthropic.Anthropic"
        assert kwargs["api_key"] == "ant-test"
        assert kwargs["opts"]["temperature"] == 0.7
