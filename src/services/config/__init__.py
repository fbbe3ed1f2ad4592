# -*- coding: utf-8 -*-
"""
Configuration Service
=====================

Loads YAML configuration from ``config/`` and environment variables from
``.env``.

Priority for every setting:
1. Environment variables
2. Module config file (``config/<name>``), merged over ``config/main.yaml``
3. Built-in defaults

Usage:
    from src.services.config import load_config_with_main, get_agent_params

    config = load_config_with_main("learning_config.yaml")
    params = get_agent_params("learning")  # {"temperature": 0.3, "max_tokens": 2048}
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[3]
load_dotenv(PROJECT_ROOT / ".env", override=False)

DEFAULT_AGENT_PARAMS: dict[str, Any] = {
    "temperature": 0.3,
    "max_tokens": 2048,
}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config_with_main(
    config_file: str | None = None,
    project_root: Path | None = None,
) -> dict[str, Any]:
    """
    Load ``config/main.yaml`` and deep-merge an optional module file over it.

    Args:
        config_file: Module config file name under ``config/`` (may not exist)
        project_root: Repository root, defaults to this checkout

    Returns:
        Merged configuration dictionary (empty if nothing is configured)
    """
    root = project_root or PROJECT_ROOT
    config = _read_yaml(root / "config" / "main.yaml")
    if config_file and config_file != "main.yaml":
        config = _deep_merge(config, _read_yaml(root / "config" / config_file))
    return config


def get_agent_params(module_name: str, project_root: Path | None = None) -> dict[str, Any]:
    """
    Get LLM sampling parameters for a module from ``config/agents.yaml``.

    Missing keys fall back to ``DEFAULT_AGENT_PARAMS``.
    """
    root = project_root or PROJECT_ROOT
    agents_cfg = _read_yaml(root / "config" / "agents.yaml")
    module_cfg = agents_cfg.get(module_name, {}) or {}
    params = dict(DEFAULT_AGENT_PARAMS)
    params.update({k: v for k, v in module_cfg.items() if v is not None})
    return params


def get_system_language(project_root: Path | None = None, default: str = "zh") -> str:
    """Get the configured interface language (``system.language``)."""
    config = load_config_with_main(project_root=project_root)
    return str(config.get("system", {}).get("language") or default)


__all__ = [
    "PROJECT_ROOT",
    "DEFAULT_AGENT_PARAMS",
    "load_config_with_main",
    "get_agent_params",
    "get_system_language",
]
