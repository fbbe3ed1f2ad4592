# -*- coding: utf-8 -*-
"""
LLM call statistics, grouped per module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging


@dataclass
class LLMStats:
    """Counts LLM calls and prompt/response sizes for one module."""

    module_name: str
    calls: int = 0
    prompt_chars: int = 0
    response_chars: int = 0
    models: dict[str, int] = field(default_factory=dict)

    def add_call(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        response: str,
    ) -> None:
        self.calls += 1
        self.prompt_chars += len(system_prompt or "") + len(user_prompt or "")
        self.response_chars += len(response or "")
        self.models[model] = self.models.get(model, 0) + 1

    def reset(self) -> None:
        self.calls = 0
        self.prompt_chars = 0
        self.response_chars = 0
        self.models.clear()

    def summary(self) -> str:
        models = ", ".join(f"{name}x{count}" for name, count in sorted(self.models.items()))
        return (
            f"[{self.module_name}] LLM calls: {self.calls} | "
            f"prompt chars: {self.prompt_chars} | response chars: {self.response_chars}"
            + (f" | models: {models}" if models else "")
        )

    def print_summary(self) -> None:
        logging.getLogger("LearningTutor.Stats").info(self.summary())


__all__ = ["LLMStats"]
