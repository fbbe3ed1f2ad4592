# -*- coding: utf-8 -*-
"""
Prompt Manager
==============

Loads agent prompt templates from YAML files laid out as::

    src/agents/<module_name>/prompts/<language>/<agent_name>.yaml

Usage:
    from src.services.prompt import get_prompt_manager

    prompts = get_prompt_manager().load_prompts("learning", "guide_agent", "en")
    system = prompts["system"]
"""

from __future__ import annotations

from pathlib import Path
import threading
from typing import Any

import yaml

AGENTS_DIR = Path(__file__).resolve().parents[2] / "agents"
FALLBACK_LANGUAGE = "zh"


class PromptManager:
    """Caches prompt dictionaries keyed by (module, agent, language)."""

    def __init__(self, agents_dir: Path | None = None) -> None:
        self.agents_dir = agents_dir or AGENTS_DIR
        self._cache: dict[tuple[str, str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _prompt_path(self, module_name: str, agent_name: str, language: str) -> Path:
        return self.agents_dir / module_name / "prompts" / language / f"{agent_name}.yaml"

    def load_prompts(
        self,
        module_name: str,
        agent_name: str,
        language: str = FALLBACK_LANGUAGE,
    ) -> dict[str, Any] | None:
        """
        Load prompts for an agent.

        Falls back to ``FALLBACK_LANGUAGE`` when the requested language has no
        file. Returns None when neither exists.
        """
        key = (module_name, agent_name, language)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        path = self._prompt_path(module_name, agent_name, language)
        if not path.exists():
            path = self._prompt_path(module_name, agent_name, FALLBACK_LANGUAGE)
        if not path.exists():
            return None

        with open(path, encoding="utf-8") as f:
            prompts = yaml.safe_load(f) or {}
        if not isinstance(prompts, dict):
            raise ValueError(f"Prompt file {path} must contain a mapping")

        with self._lock:
            self._cache[key] = prompts
        return prompts

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()


_prompt_manager: PromptManager | None = None


def get_prompt_manager() -> PromptManager:
    """Get the process-wide prompt manager."""
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
    return _prompt_manager


__all__ = ["PromptManager", "get_prompt_manager"]
