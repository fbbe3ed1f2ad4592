#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
GoalAgent - Turns the learner's first message into a concrete learning goal.
"""

from src.agents.base_agent import BaseAgent
from src.services.llm import LLMError

from ..errors import GoalExtractionError

_QUOTE_CHARS = "\"'`“”‘’「」『』"
_BULLET_PREFIXES = ("- ", "* ", "• ")


class GoalAgent(BaseAgent):
    """Goal extraction agent"""

    def __init__(self, language: str = "zh"):
        super().__init__(
            module_name="learning",
            agent_name="goal_agent",
            language=language,
        )
        if not self.get_prompt("system") or not self.get_prompt("user_template"):
            raise ValueError(f"GoalAgent prompts missing 'system' or 'user_template' ({language})")

    @staticmethod
    def clean_goal(raw: str) -> str:
        """Keep the first non-empty line, without bullets, quotes or padding."""
        for line in (raw or "").splitlines():
            line = line.strip()
            if not line:
                continue
            for prefix in _BULLET_PREFIXES:
                if line.startswith(prefix):
                    line = line[len(prefix):]
            return line.strip().strip(_QUOTE_CHARS).strip()
        return ""

    async def process(self, user_input: str) -> str:
        """
        Extract a learning goal from ``user_input``.

        Raises:
            GoalExtractionError: The LLM call failed or produced no goal
        """
        user_prompt = self.get_prompt("user_template").format(user_input=user_input)

        try:
            response = await self.call_llm(
                user_prompt=user_prompt,
                system_prompt=self.get_prompt("system"),
                stage="extract_goal",
            )
        except LLMError as e:
            raise GoalExtractionError(f"Goal extraction failed: {e}") from e

        goal = self.clean_goal(response)
        if not goal:
            raise GoalExtractionError("Goal extraction returned an empty goal")

        self.logger.info(f"Extracted goal: {goal}")
        return goal


__all__ = ["GoalAgent"]
