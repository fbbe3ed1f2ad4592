# -*- coding: utf-8 -*-
"""
Provider / model capability checks.
"""

from __future__ import annotations

# Reasoning models only accept the default sampling temperature
_FIXED_TEMPERATURE_PREFIXES = ("o1", "o3", "o4")

# Models that emit <think>...</think> blocks before the answer
_THINKING_MARKERS = ("deepseek-r1", "qwq", "qwen3")


def _model_name(model: str | None) -> str:
    return (model or "").lower().rsplit("/", 1)[-1]


def supports_response_format(binding: str, model: str | None) -> bool:
    """Whether ``response_format={"type": "json_object"}`` may be sent."""
    binding = (binding or "openai").lower()
    if binding in ("anthropic", "claude", "ollama"):
        return False
    return not _model_name(model).startswith(_FIXED_TEMPERATURE_PREFIXES)


def get_effective_temperature(binding: str, model: str | None, temperature: float) -> float:
    """Clamp the temperature for models that reject custom values."""
    if _model_name(model).startswith(_FIXED_TEMPERATURE_PREFIXES):
        return 1.0
    return temperature


def has_thinking_tags(binding: str, model: str | None) -> bool:
    name = (model or "").lower()
    return any(marker in name for marker in _THINKING_MARKERS)


__all__ = [
    "supports_response_format",
    "get_effective_temperature",
    "has_thinking_tags",
]
