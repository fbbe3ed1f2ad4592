#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
GuideAgent - Writes the next tutor message for the active learning item.

The system prompt is either the topic-less greeting or a header describing
the item followed by the template of its current teaching phase.
"""

from typing import Optional

from src.agents.base_agent import BaseAgent
from src.services.llm import LLMError

from ..errors import GuidanceError
from ..models import LearningItem, TeachingPhase
from ..phase_detector import determine_teaching_phase

MAX_CONTEXT_MESSAGES = 4

INITIAL_TEMPERATURE = 0.9
GUIDE_TEMPERATURE = 0.8


class GuideAgent(BaseAgent):
    """Guidance generation agent"""

    def __init__(self, language: str = "zh"):
        super().__init__(
            module_name="learning",
            agent_name="guide_agent",
            language=language,
        )
        missing = [
            phase.value for phase in TeachingPhase if not self.get_prompt("phases", phase.value)
        ]
        if not self.get_prompt("header"):
            missing.append("header")
        if not self.get_prompt("initial"):
            missing.append("initial")
        if missing:
            raise ValueError(f"GuideAgent prompts missing templates: {missing} ({language})")

    def build_system_prompt(self, item: LearningItem) -> str:
        if item.is_awaiting_topic:
            return self.get_prompt("initial").strip()

        header = self.get_prompt("header").format(
            goal=item.goal,
            summary=item.cognitive_state.summary,
            missing_parts=item.cognitive_state.missing_parts or "",
        )
        phase = determine_teaching_phase(item)
        return f"{header.strip()}\n\n{self.get_prompt('phases', phase.value).strip()}"

    @staticmethod
    def select_temperature(item: LearningItem) -> float:
        return INITIAL_TEMPERATURE if item.is_awaiting_topic else GUIDE_TEMPERATURE

    @staticmethod
    def build_context(messages: list[dict[str, str]]) -> list[dict[str, str]]:
        """The most recent MAX_CONTEXT_MESSAGES turns as chat messages."""
        return [
            {"role": message["role"], "content": message["content"]}
            for message in messages[-MAX_CONTEXT_MESSAGES:]
        ]

    async def process(
        self,
        item: LearningItem,
        messages: list[dict[str, str]],
        temperature: Optional[float] = None,
    ) -> str:
        """
        Generate the next tutor message.

        Args:
            item: The active learning item
            messages: Dialogue history, oldest first
            temperature: Overrides the phase-dependent default

        Raises:
            GuidanceError: The LLM call failed or produced nothing
        """
        system_prompt = self.build_system_prompt(item)
        context = self.build_context(messages)
        if temperature is None:
            temperature = self.select_temperature(item)

        # The conversation sent to the provider must open with a user turn.
        kickoff = self.get_prompt("kickoff", "Hello")
        chat_messages = None
        if context:
            if context[0]["role"] == "assistant":
                context = [{"role": "user", "content": kickoff}, *context]
            chat_messages = [{"role": "system", "content": system_prompt}, *context]

        try:
            response = await self.call_llm(
                user_prompt=kickoff,
                system_prompt=system_prompt,
                messages=chat_messages,
                temperature=temperature,
                stage="guide",
            )
        except LLMError as e:
            raise GuidanceError(f"Guidance call failed: {e}") from e

        text = (response or "").strip()
        if not text:
            raise GuidanceError("Guidance call returned an empty message")
        return text


__all__ = [
    "GuideAgent",
    "MAX_CONTEXT_MESSAGES",
    "INITIAL_TEMPERATURE",
    "GUIDE_TEMPERATURE",
]
