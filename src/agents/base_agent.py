#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
BaseAgent - Base class for the tutor's language-model collaborators.

Delegates to dedicated services:
- AgentConfigResolver: sampling parameters and provider settings
- LLMOrchestrator: LLM calls, logging and per-module statistics
- PromptManager: per-language prompt templates
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.logging import get_logger
from src.services.agent import AgentConfigResolver, LLMOrchestrator
from src.services.prompt import get_prompt_manager


class BaseAgent(ABC):
    """
    Base class for the learning collaborators.

    Subclasses load their templates from
    ``src/agents/<module>/prompts/<language>/<agent>.yaml`` and implement
    ``process()``.
    """

    def __init__(self, module_name: str, agent_name: str, language: str = "zh"):
        self.module_name = module_name
        self.agent_name = agent_name
        self.language = language
        self.logger = get_logger(f"{module_name.capitalize()}.{agent_name}")

        self._orchestrator = LLMOrchestrator(
            config_resolver=AgentConfigResolver(module_name, agent_name),
            agent_name=agent_name,
            module_name=module_name,
            logger=self.logger,
        )

        self.prompts = get_prompt_manager().load_prompts(
            module_name=module_name,
            agent_name=agent_name,
            language=language,
        )
        if not self.prompts:
            self.logger.warning(f"No prompts found for {agent_name} ({language})")

    async def call_llm(
        self,
        user_prompt: str,
        system_prompt: str,
        messages: Optional[list[dict[str, str]]] = None,
        response_format: Optional[dict[str, str]] = None,
        temperature: Optional[float] = None,
        stage: Optional[str] = None,
    ) -> str:
        """
        Call the LLM with this agent's resolved configuration.

        Args:
            user_prompt: User prompt (ignored if messages provided)
            system_prompt: System prompt (ignored if messages provided)
            messages: Pre-built chat history including the system message
            response_format: Response format (e.g., {"type": "json_object"})
            temperature: Overrides the agents.yaml temperature
            stage: Stage marker for logging

        Raises:
            LLMError: Propagated from the provider layer
        """
        return await self._orchestrator.complete(
            user_prompt=user_prompt,
            system_prompt=system_prompt,
            messages=messages,
            response_format=response_format,
            temperature=temperature,
            stage=stage,
        )

    @classmethod
    def reset_stats(cls, module_name: Optional[str] = None):
        LLMOrchestrator.reset_stats(module_name)

    @classmethod
    def print_stats(cls, module_name: Optional[str] = None):
        LLMOrchestrator.print_stats(module_name)

    def get_prompt(self, key: str, field_or_fallback: Optional[str] = None) -> Optional[str]:
        """
        Look up a prompt template.

        ``get_prompt("system")`` reads a top-level key; when that key holds a
        mapping, ``get_prompt("phases", "transfer")`` reads one of its fields.
        For a plain key the second argument is the fallback.
        """
        value = (self.prompts or {}).get(key)
        if isinstance(value, dict):
            return value.get(field_or_fallback) if field_or_fallback else None
        if value is not None:
            return value
        return field_or_fallback

    @abstractmethod
    async def process(self, *args, **kwargs) -> Any:
        """Run the agent's single task."""


__all__ = ["BaseAgent"]
