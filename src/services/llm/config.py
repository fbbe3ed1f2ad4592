# -*- coding: utf-8 -*-
"""
LLM Configuration
=================

Resolves the active LLM provider settings from environment variables.

Priority:
1. ``LLM_*`` variables (``LLM_BINDING``, ``LLM_MODEL``, ``LLM_API_KEY``,
   ``LLM_HOST``, ``LLM_API_VERSION``)
2. OpenAI-style variables (``OPENAI_MODEL``, ``OPENAI_API_KEY``,
   ``OPENAI_API_BASE``)
3. Defaults (an OpenAI-compatible DeepSeek endpoint)
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

DEFAULT_BINDING = "openai"
DEFAULT_MODEL = "deepseek-ai/DeepSeek-V3.2"
DEFAULT_BASE_URL = "https://api.siliconflow.cn/v1"
DEFAULT_OLLAMA_URL = "http://localhost:11434"

# Models that take ``max_completion_tokens`` instead of ``max_tokens``
_COMPLETION_TOKEN_PREFIXES = ("o1", "o3", "o4", "gpt-5")


@dataclass(frozen=True)
class LLMConfig:
    binding: str
    model: str
    api_key: str | None
    base_url: str | None
    api_version: str | None = None


def _env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def get_llm_config() -> LLMConfig:
    """Build the LLM config from the current environment."""
    binding = (_env("LLM_BINDING") or DEFAULT_BINDING).lower()
    model = _env("LLM_MODEL", "OPENAI_MODEL") or DEFAULT_MODEL

    if binding in ("anthropic", "claude"):
        api_key = _env("LLM_API_KEY", "ANTHROPIC_API_KEY")
        base_url = _env("LLM_HOST")
    elif binding == "ollama":
        api_key = None
        base_url = _env("LLM_HOST") or DEFAULT_OLLAMA_URL
    else:
        api_key = _env("LLM_API_KEY", "OPENAI_API_KEY")
        base_url = _env("LLM_HOST", "OPENAI_API_BASE") or DEFAULT_BASE_URL

    return LLMConfig(
        binding=binding,
        model=model,
        api_key=api_key,
        base_url=base_url,
        api_version=_env("LLM_API_VERSION"),
    )


def get_token_limit_kwargs(model: str, max_tokens: int) -> dict[str, Any]:
    """Return the right token-limit keyword for ``model``."""
    name = (model or "").lower().rsplit("/", 1)[-1]
    if name.startswith(_COMPLETION_TOKEN_PREFIXES):
        return {"max_completion_tokens": max_tokens}
    return {"max_tokens": max_tokens}


__all__ = [
    "DEFAULT_BINDING",
    "DEFAULT_MODEL",
    "DEFAULT_BASE_URL",
    "DEFAULT_OLLAMA_URL",
    "LLMConfig",
    "get_llm_config",
    "get_token_limit_kwargs",
]
