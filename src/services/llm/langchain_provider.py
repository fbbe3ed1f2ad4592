# -*- coding: utf-8 -*-
"""
LangChain LLM Provider
======================

Provides LangChain-based chat completion with:
- Multi-provider support (OpenAI-compatible, Anthropic, Ollama)
- Error mapping onto the ``LLMError`` hierarchy
- Optional Langfuse tracing

Usage:
    from src.services.llm.langchain_provider import LangChainProvider

    response = await LangChainProvider.complete(
        prompt="Hello",
        system_prompt="You are helpful",
        model="deepseek-ai/DeepSeek-V3.2",
        api_key="sk-...",
        base_url="https://api.siliconflow.cn/v1",
        binding="openai",
    )
"""

import os
from typing import Any, Dict, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.logging import get_logger

from .capabilities import get_effective_temperature, supports_response_format
from .config import DEFAULT_MODEL, get_token_limit_kwargs
from .exceptions import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMConfigError,
    LLMError,
    LLMRateLimitError,
)
from .utils import clean_thinking_tags, is_local_llm_server, sanitize_url

logger = get_logger("LangChain")

# Langfuse callback handler - lazy loaded
_langfuse_handler: Optional[Any] = None
_langfuse_checked: bool = False


def _get_langfuse_handler():
    """Lazily initialize and return the Langfuse callback handler."""
    global _langfuse_handler, _langfuse_checked
    if _langfuse_checked:
        return _langfuse_handler
    _langfuse_checked = True
    if not os.getenv("LANGFUSE_PUBLIC_KEY"):
        return None
    try:
        from langfuse.langchain import CallbackHandler

        _langfuse_handler = CallbackHandler()
        logger.info("Langfuse tracing enabled")
    except ImportError:
        logger.debug("langfuse not installed, tracing disabled")
        _langfuse_handler = None
    return _langfuse_handler


class LangChainProvider:
    """LangChain-based chat completion over several provider bindings."""

    @classmethod
    def _get_llm(
        cls,
        binding: str,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> Any:
        """
        Get a LangChain chat model for the specified provider.

        Args:
            binding: Provider binding (openai, anthropic, ollama)
            model: Model name
            api_key: API key
            base_url: Base URL for the API
            temperature: Sampling temperature
            **kwargs: Additional provider-specific arguments

        Returns:
            LangChain BaseChatModel instance
        """
        binding_lower = (binding or "openai").lower()
        common_kwargs: Dict[str, Any] = {
            "temperature": get_effective_temperature(binding_lower, model, temperature),
        }

        if binding_lower in ["anthropic", "claude"]:
            return cls._get_anthropic_llm(model, api_key, base_url, **common_kwargs, **kwargs)
        elif binding_lower == "ollama":
            return cls._get_ollama_llm(model, base_url, **common_kwargs, **kwargs)
        return cls._get_openai_llm(model, api_key, base_url, **common_kwargs, **kwargs)

    @classmethod
    def _get_openai_llm(
        cls,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get OpenAI-compatible LLM instance."""
        from langchain_openai import ChatOpenAI

        if base_url:
            base_url = sanitize_url(base_url, model)

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key and base_url and is_local_llm_server(base_url):
            # Local OpenAI-compatible servers ignore the key but the client requires one
            api_key = "EMPTY"

        llm_kwargs: Dict[str, Any] = {"model": model, **kwargs}
        if api_key:
            llm_kwargs["api_key"] = api_key
        if base_url:
            llm_kwargs["base_url"] = base_url

        return ChatOpenAI(**llm_kwargs)

    @classmethod
    def _get_anthropic_llm(
        cls,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get Anthropic LLM instance."""
        from langchain_anthropic import ChatAnthropic

        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise LLMAuthenticationError("Anthropic API key not provided", provider="anthropic")

        llm_kwargs: Dict[str, Any] = {"model": model, "api_key": api_key, **kwargs}
        if base_url:
            llm_kwargs["base_url"] = base_url

        return ChatAnthropic(**llm_kwargs)

    @classmethod
    def _get_ollama_llm(
        cls,
        model: str,
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Get Ollama LLM instance."""
        from langchain_ollama import ChatOllama

        # ChatOllama names the token limit num_predict
        for key in ("max_tokens", "max_completion_tokens"):
            if key in kwargs:
                kwargs["num_predict"] = kwargs.pop(key)
        kwargs.pop("model_kwargs", None)

        llm_kwargs: Dict[str, Any] = {"model": model, **kwargs}
        if base_url:
            # Ollama base URL should not have /v1 suffix
            base_url = base_url.rstrip("/")
            if base_url.endswith("/v1"):
                base_url = base_url[:-3]
            llm_kwargs["base_url"] = base_url

        return ChatOllama(**llm_kwargs)

    @classmethod
    def _build_messages(
        cls,
        prompt: str,
        system_prompt: str,
        messages: Optional[List[Dict[str, str]]] = None,
    ) -> List[BaseMessage]:
        """
        Build LangChain message list.

        When ``messages`` is given it is used verbatim (system prompt included
        by the caller); otherwise a system + human pair is built.
        """
        if messages:
            result: List[BaseMessage] = []
            for msg in messages:
                role = msg.get("role", "user")
                content = msg.get("content", "")
                if role == "system":
                    result.append(SystemMessage(content=content))
                elif role == "assistant":
                    result.append(AIMessage(content=content))
                else:
                    result.append(HumanMessage(content=content))
            return result

        return [SystemMessage(content=system_prompt), HumanMessage(content=prompt)]

    @classmethod
    async def complete(
        cls,
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
        """
        Complete a prompt using LangChain.

        Args:
            prompt: User prompt (ignored if messages provided)
            system_prompt: System prompt (ignored if messages provided)
            model: Model name
            api_key: API key
            base_url: Base URL for the API
            api_version: API version (Azure-style deployments)
            binding: Provider binding (openai, anthropic, ollama)
            messages: Pre-built messages array (optional)
            temperature: Temperature for generation
            max_tokens: Maximum tokens to generate
            response_format: Response format (e.g., {"type": "json_object"})

        Returns:
            Generated response text

        Raises:
            LLMError: On configuration or provider failure
        """
        model = model or DEFAULT_MODEL
        binding_lower = (binding or "openai").lower()

        llm_kwargs: Dict[str, Any] = {}
        if temperature is not None:
            llm_kwargs["temperature"] = temperature
        if max_tokens:
            llm_kwargs.update(get_token_limit_kwargs(model, max_tokens))
        if response_format and supports_response_format(binding_lower, model):
            llm_kwargs["model_kwargs"] = {"response_format": response_format}

        try:
            llm = cls._get_llm(
                binding=binding,
                model=model,
                api_key=api_key,
                base_url=base_url,
                **llm_kwargs,
            )
            msg_list = cls._build_messages(prompt, system_prompt, messages)

            langfuse_cb = _get_langfuse_handler()
            invoke_config = {"callbacks": [langfuse_cb]} if langfuse_cb else {}
            response = await llm.ainvoke(msg_list, config=invoke_config)

            content = response.content if hasattr(response, "content") else str(response)
            if not isinstance(content, str):
                # Some providers return content blocks
                content = "".join(
                    block.get("text", "") if isinstance(block, dict) else str(block)
                    for block in content
                )
            return clean_thinking_tags(content, binding, model)

        except LLMError:
            raise
        except ImportError as e:
            raise LLMConfigError(f"Provider package not installed: {e}", provider=binding)
        except Exception as e:
            error_msg = str(e)
            lowered = error_msg.lower()

            if "authentication" in lowered or "api key" in lowered or "401" in error_msg:
                raise LLMAuthenticationError(
                    f"Authentication failed: {error_msg}",
                    provider=binding,
                )
            elif "rate limit" in lowered or "429" in error_msg:
                raise LLMRateLimitError(
                    f"Rate limit exceeded: {error_msg}",
                    provider=binding,
                )
            raise LLMAPIError(
                f"LangChain API error: {error_msg}",
                provider=binding,
            )


__all__ = [
    "LangChainProvider",
]
