#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
AssessmentAgent - Classifies a learner answer into a cognitive-state label.

The model is asked for JSON only. Its output is validated against a closed
label vocabulary; a label outside it is a contract violation, never coerced.
"""

import json
import re

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from src.agents.base_agent import BaseAgent
from src.services.llm import LLMError

from ..errors import AssessmentError, ContractViolationError
from ..models import CognitiveStateLabel, LearningItem

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


class AssessmentResult(BaseModel):
    """Validated output of one assessment call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cognitive_state: CognitiveStateLabel = Field(
        validation_alias=AliasChoices("cognitive_state", "cognitiveState"),
    )
    reasoning: str = Field(min_length=1)


class AssessmentAgent(BaseAgent):
    """Cognitive-state assessment agent"""

    def __init__(self, language: str = "zh"):
        super().__init__(
            module_name="learning",
            agent_name="assessment_agent",
            language=language,
        )
        if not self.get_prompt("system") or not self.get_prompt("user_template"):
            raise ValueError(
                f"AssessmentAgent prompts missing 'system' or 'user_template' ({language})"
            )

    @staticmethod
    def parse_response(text: str) -> AssessmentResult:
        """
        Parse the raw model output.

        Raises:
            ContractViolationError: The label is not one of the known labels
            AssessmentError: The output is not JSON or lacks a required field
        """
        content = (text or "").strip()
        match = _CODE_FENCE.search(content)
        if match:
            content = match.group(1).strip()

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise AssessmentError(f"Assessment output is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AssessmentError("Assessment output must be a JSON object")

        label = data.get("cognitive_state", data.get("cognitiveState"))
        if isinstance(label, str) and label not in {member.value for member in CognitiveStateLabel}:
            raise ContractViolationError(f"Unknown cognitive state label: {label!r}")

        try:
            return AssessmentResult.model_validate(data)
        except ValidationError as e:
            raise AssessmentError(f"Assessment output is incomplete: {e}") from e

    async def process(self, answer: str, item: LearningItem) -> AssessmentResult:
        """
        Assess ``answer`` against the item's goal and current understanding.

        Raises:
            AssessmentError: The LLM call failed or its output was unusable
        """
        user_prompt = self.get_prompt("user_template").format(
            goal=item.goal,
            summary=item.cognitive_state.summary,
            missing_parts=item.cognitive_state.missing_parts or "",
            answer=answer,
        )

        try:
            response = await self.call_llm(
                user_prompt=user_prompt,
                system_prompt=self.get_prompt("system"),
                response_format={"type": "json_object"},
                stage="assess",
            )
        except LLMError as e:
            raise AssessmentError(f"Assessment call failed: {e}") from e

        return self.parse_response(response)


__all__ = ["AssessmentAgent", "AssessmentResult"]
