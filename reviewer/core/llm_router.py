"""LiteLLM Router configuration for retry, fallback, and cooldown.

Supports two providers:
- OpenRouter (default): Uses OPENROUTER_API_KEY
- Azure OpenAI: Uses AZURE_API_KEY, AZURE_API_BASE, AZURE_API_VERSION

Retries here cover transport failures (rate limits, 5xx). A model that
answers with malformed JSON is not retried; see ModelResponseError.
"""

import os

from litellm import Router

from reviewer.core.config import (
    LLM_PROVIDER,
    API_KEY_ENV_VAR,
    SMART_MODEL,
    FAST_MODEL,
    DOCUMENT_MODEL,
)


def _openrouter_entry(model: str) -> dict:
    return {
        "model_name": model,
        "litellm_params": {
            "model": model,
            "api_key": f"os.environ/{API_KEY_ENV_VAR}",
        },
    }


def _azure_entry(model: str) -> dict:
    return {
        "model_name": model,
        "litellm_params": {
            "model": model,
            "api_key": os.environ.get("AZURE_API_KEY", ""),
            "api_base": os.environ.get("AZURE_API_BASE", ""),
            "api_version": os.environ.get("AZURE_API_VERSION", "2024-02-15-preview"),
        },
    }


PROVIDER_WILDCARDS = {"openrouter": "openrouter/*", "azure": "azure/*"}
"""Catch-all deployment per provider, so a model override such as
``openrouter/anthropic/claude-3.5-sonnet`` routes without being configured."""


def _build_model_list() -> list[dict]:
    """One deployment per distinct configured model, then the provider wildcard.

    Exact model names take precedence over the wildcard entry.
    """
    models = list(dict.fromkeys([FAST_MODEL, SMART_MODEL, DOCUMENT_MODEL]))
    build_entry = _azure_entry if LLM_PROVIDER == "azure" else _openrouter_entry
    wildcard = PROVIDER_WILDCARDS.get(LLM_PROVIDER, PROVIDER_WILDCARDS["openrouter"])
    return [build_entry(model) for model in models] + [build_entry(wildcard)]


def _build_fallbacks() -> list[dict]:
    """Fast model falls back to the smart one. The PDF-reading model has no
    fallback since the others may not accept file parts."""
    if FAST_MODEL == SMART_MODEL:
        return []
    return [{FAST_MODEL: [SMART_MODEL]}]


def build_router() -> Router:
    """Build the LLM Router with retry and fallback configuration.

    The router handles:
    - Automatic retries with backoff
    - Fallback from the fast to the smart model on exhausted retries
    - Cooldown tracking for failed deployments
    """
    return Router(
        model_list=_build_model_list(),
        num_retries=2,
        retry_after=4,
        cooldown_time=60,
        allowed_fails=2,
        fallbacks=_build_fallbacks(),
    )


router = build_router()
