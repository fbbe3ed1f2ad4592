# -*- coding: utf-8 -*-
"""
LLM Orchestrator
================

Orchestrates LLM calls with:
- Parameter resolution via AgentConfigResolver
- Logging (input/output)
- Call statistics per module
- Error logging with context
"""

import time
from typing import Any, Optional

from src.logging import LLMStats, get_logger
from src.services.llm import complete as llm_complete

from .config_resolver import AgentConfigResolver


class LLMOrchestrator:
    """
    Orchestrates LLM calls for agents.

    Usage:
        config = AgentConfigResolver("learning", "guide_agent")
        orchestrator = LLMOrchestrator(config, "guide_agent", "learning")

        response = await orchestrator.complete(
            user_prompt="Hello",
            system_prompt="You are helpful",
        )
    """

    # Shared stats per module (class-level singleton pattern)
    _stats: dict[str, LLMStats] = {}

    def __init__(
        self,
        config_resolver: AgentConfigResolver,
        agent_name: str,
        module_name: str,
        logger: Any = None,
    ):
        """
        Initialize the LLM orchestrator.

        Args:
            config_resolver: AgentConfigResolver instance for parameter resolution
            agent_name: Agent name for logging and tracking
            module_name: Module name for stats grouping
            logger: Optional custom logger (defaults to module.agent logger)
        """
        self.config = config_resolver
        self.agent_name = agent_name
        self.module_name = module_name
        self.logger = logger or get_logger(f"{module_name}.{agent_name}")

    @classmethod
    def get_stats(cls, module_name: str) -> LLMStats:
        """Get or create shared LLMStats for a module."""
        if module_name not in cls._stats:
            cls._stats[module_name] = LLMStats(module_name=module_name.capitalize())
        return cls._stats[module_name]

    @classmethod
    def reset_stats(cls, module_name: Optional[str] = None) -> None:
        """Reset stats for a module or all modules."""
        if module_name:
            if module_name in cls._stats:
                cls._stats[module_name].reset()
        else:
            for stats in cls._stats.values():
                stats.reset()

    @classmethod
    def print_stats(cls, module_name: Optional[str] = None) -> None:
        """Log stats summary for a module or all modules."""
        if module_name:
            if module_name in cls._stats:
                cls._stats[module_name].print_summary()
        else:
            for stats in cls._stats.values():
                stats.print_summary()

    async def complete(
        self,
        user_prompt: str,
        system_prompt: str,
        messages: Optional[list[dict[str, str]]] = None,
        response_format: Optional[dict[str, str]] = None,
        temperature: Optional[float] = None,
        stage: Optional[str] = None,
    ) -> str:
        """
        Complete a prompt, logging the call and recording it in the module stats.

        Raises:
            LLMError: Propagated from the provider layer
        """
        resolved_model = self.config.get_model()
        stage_label = stage or self.agent_name

        kwargs = self.config.get_llm_kwargs(
            temperature=temperature,
            response_format=response_format,
        )
        if messages:
            kwargs["messages"] = messages

        self.logger.debug(
            f"[{stage_label}] LLM input: model={resolved_model}, "
            f"temperature={kwargs.get('temperature')}, "
            f"messages={len(messages) if messages else 0}"
        )

        start_time = time.time()
        try:
            response = await llm_complete(
                prompt=user_prompt,
                system_prompt=system_prompt,
                model=resolved_model,
                api_key=self.config.get_api_key(),
                base_url=self.config.get_base_url(),
                api_version=self.config.get_api_version(),
                **kwargs,
            )
        except Exception as e:
            self.logger.error(f"[{stage_label}] LLM call failed: {e}")
            raise

        duration = time.time() - start_time

        prompt_text = user_prompt
        if messages:
            prompt_text = "\n".join(m.get("content", "") for m in messages)
        self.get_stats(self.module_name).add_call(
            model=resolved_model,
            system_prompt=system_prompt,
            user_prompt=prompt_text,
            response=response,
        )

        self.logger.debug(
            f"[{stage_label}] LLM response: model={resolved_model}, "
            f"length={len(response)}, duration={duration:.2f}s"
        )

        return response


__all__ = [
    "LLMOrchestrator",
]
