#!/usr/bin/env python3
"""
Environment and Provider Diagnostics Script

Prints the resolved runtime configuration and the LLM provider chain.
Use this to verify that:
1. The primary and fallback providers are importable LlamaIndex classes (or ollama)
2. API keys are present for hosted providers
3. Email delivery is configured, or will be simulated

Usage:
    cd apps/backend
    python scripts/inspect_env.py
"""

import importlib
import os
import sys

# Add the package to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _check_provider(label, provider, api_key, errors, warnings):
    if not provider:
        print(f"ℹ️  {label}: disabled")
        return
    if provider == "ollama":
        print(f"✅ {label}: ollama (local, no API key needed)")
        return
    module_name, _, class_name = provider.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        getattr(module, class_name)
        print(f"✅ {label}: {provider} importable")
    except (ImportError, AttributeError, ValueError) as e:
        print(f"❌ {label}: {provider} cannot be imported ({e})")
        errors.append(f"{label} '{provider}' is not importable; install the matching llama-index-llms-* package")
    if not api_key:
        print(f"⚠️  {label}: API key not set")
        warnings.append(f"{label} has no API key; it will fail and the chain will move on")


def main():
    print("=" * 60)
    print("ProfileCrafted Provider Diagnostics")
    print("=" * 60)

    from profilecrafted.core.config import settings
    from profilecrafted.agent import AgentManager

    print("\n📋 ENVIRONMENT VARIABLES (from .env)")
    print("-" * 40)
    print(f"  ENVIRONMENT:      {settings.ENVIRONMENT}")
    print(f"  ALLOWED_ORIGINS:  {settings.ALLOWED_ORIGINS}")

    print("\n🤖 LLM Configuration:")
    print(f"  LLM_PROVIDER:           {settings.LLM_PROVIDER or '(not set)'}")
    print(f"  LL_MODEL:               {settings.LL_MODEL}")
    print(f"  LLM_API_KEY:            {'✅ Set' if settings.LLM_API_KEY else '❌ NOT SET'}")
    print(f"  FALLBACK_LLM_PROVIDER:  {settings.FALLBACK_LLM_PROVIDER or '(not set)'}")
    print(f"  FALLBACK_LL_MODEL:      {settings.FALLBACK_LL_MODEL}")
    print(f"  FALLBACK_LLM_API_KEY:   {'✅ Set' if settings.FALLBACK_LLM_API_KEY else '❌ NOT SET'}")
    print(f"  LLM_MAX_TOKENS:         {settings.LLM_MAX_TOKENS}")
    print(f"  LLM_TIMEOUT_SECONDS:    {settings.LLM_TIMEOUT_SECONDS}")
    print(f"  ESSAY_TARGET_WORDS:     {settings.ESSAY_TARGET_WORDS}")

    print("\n📧 Email Configuration:")
    print(f"  EMAIL_API_URL:          {settings.EMAIL_API_URL}")
    print(f"  EMAIL_SERVICE_API_KEY:  {'Set' if settings.EMAIL_SERVICE_API_KEY else '(not set, sends are simulated)'}")

    print("\n✅ VALIDATION CHECKS")
    print("-" * 40)

    errors = []
    warnings = []

    _check_provider("Primary provider", settings.LLM_PROVIDER, settings.LLM_API_KEY, errors, warnings)
    _check_provider("Fallback provider", settings.FALLBACK_LLM_PROVIDER, settings.FALLBACK_LLM_API_KEY, errors, warnings)

    chain = AgentManager.from_settings(settings).provider_names
    print(f"\n🔗 Provider chain: {' -> '.join(chain + ['template essay'])}")
    if not chain:
        warnings.append("No LLM provider configured; every essay will use the template fallback")

    print("\n" + "=" * 60)
    if errors:
        print("❌ ERRORS FOUND:")
        for err in errors:
            print(f"   • {err}")
        sys.exit(1)
    elif warnings:
        print("⚠️  WARNINGS (non-critical):")
        for warn in warnings:
            print(f"   • {warn}")
        print("\n✅ The API will run; essays fall back to the template when providers fail.")
        sys.exit(0)
    else:
        print("✅ ALL CHECKS PASSED")
        sys.exit(0)


if __name__ == "__main__":
    main()
