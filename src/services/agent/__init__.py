# -*- coding: utf-8 -*-
"""
Agent Services
==============

Services for agent infrastructure:
- AgentConfigResolver: Configuration resolution with priority
- LLMOrchestrator: LLM call orchestration with logging and tracking

Usage:
    from src.services.agent import AgentConfigResolver, LLMOrchestrator

    config = AgentConfigResolver("learning", "assessment_agent")
    orchestrator = LLMOrchestrator(
        config_resolver=config,
        agent_name="assessment_agent",
        module_name="learning",
    )

    response = await orchestrator.complete(
        user_prompt="Hello",
        system_prompt="You are helpful",
    )
"""

from .config_resolver import AgentConfigResolver
from .orchestrator import LLMOrchestrator

__all__ = [
    "AgentConfigResolver",
    "LLMOrchestrator",
]
