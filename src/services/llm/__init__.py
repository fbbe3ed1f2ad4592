# -*- coding: utf-8 -*-
"""
LLM Services
============

Single entry point for chat completions.

Usage:
    from src.services.llm import complete, get_llm_config

    config = get_llm_config()
    text = await complete(
        prompt="Hello",
        system_prompt="You are helpful",
        model=config.model,
        api_key=config.api_key,
        base_url=config.base_url,
        binding=config.binding,
    )
"""

from typing import Any, Dict, List, Optional

from .capabilities import supports_response_format
from .config import LLMConfig, get_llm_config, get_token_limit_kwargs
from .exceptions import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMConfigError,
    LLMError,
    LLMRateLimitError,
)
from .langchain_provider import LangChainProvider


async def complete(
    prompt: str,
    system_prompt: str = "You are a helpful assistant.",
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    api_version: Optional[str] = None,
    binding: str = "openai",
    messages: Optional[List[Dict[str, str]]] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    response_format: Optional[Dict[str, str]] = None,
    **kwargs: Any,
) -> str:
    """Complete a prompt through the configured provider binding."""
    return await LangChainProvider.complete(
        prompt=prompt,
        system_prompt=system_prompt,
        model=model,
        api_key=api_key,
        base_url=base_url,
        api_version=api_version,
        binding=binding,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
        response_format=response_format,
        **kwargs,
    )


__all__ = [
    "LLMConfig",
    "LLMError",
    "LLMConfigError",
    "LLMAPIError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "complete",
    "get_llm_config",
    "get_token_limit_kwargs",
    "supports_response_format",
]
