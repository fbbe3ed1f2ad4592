# -*- coding: utf-8 -*-
"""
Agent Configuration Resolver
============================

Resolves agent configuration with proper priority:
1. Explicit overrides (passed to methods)
2. Module-specific params (from config/agents.yaml)
3. LLM config (from environment, see src.services.llm.config)
4. Defaults
"""

from typing import Any, Optional

from src.services.config import get_agent_params
from src.services.llm import LLMConfigError, get_llm_config, supports_response_format


class AgentConfigResolver:
    """
    Resolves the sampling parameters and provider settings of one agent.

    Usage:
        resolver = AgentConfigResolver("learning", "guide_agent")
        kwargs = resolver.get_llm_kwargs(temperature=0.9)
    """

    def __init__(self, module_name: str, agent_name: str):
        self.module_name = module_name
        self.agent_name = agent_name
        self._agent_params = get_agent_params(module_name)
        self._llm_config = get_llm_config()

    def get_model(self) -> str:
        """
        Raises:
            LLMConfigError: If no model is configured
        """
        if self._llm_config.model:
            return self._llm_config.model
        raise LLMConfigError(
            f"Model not configured for agent {self.agent_name}. "
            "Please set LLM_MODEL in .env."
        )

    def get_api_key(self) -> Optional[str]:
        return self._llm_config.api_key

    def get_base_url(self) -> Optional[str]:
        return self._llm_config.base_url

    def get_api_version(self) -> Optional[str]:
        return self._llm_config.api_version

    def get_llm_kwargs(
        self,
        temperature: Optional[float] = None,
        response_format: Optional[dict] = None,
    ) -> dict[str, Any]:
        """
        Build kwargs for ``src.services.llm.complete``.

        ``response_format`` is dropped for bindings and models that reject it.
        """
        binding = self._llm_config.binding
        kwargs: dict[str, Any] = {
            "temperature": temperature if temperature is not None else self._agent_params["temperature"],
            "binding": binding,
        }
        if self._agent_params.get("max_tokens"):
            # The provider maps this onto max_completion_tokens where needed
            kwargs["max_tokens"] = self._agent_params["max_tokens"]
        if response_format and supports_response_format(binding, self.get_model()):
            kwargs["response_format"] = response_format
        return kwargs


__all__ = [
    "AgentConfigResolver",
]
