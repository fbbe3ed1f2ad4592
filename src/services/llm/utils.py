# -*- coding: utf-8 -*-
"""
LLM helper functions.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .capabilities import has_thinking_tags

_THINK_BLOCK = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)
_COMPLETIONS_SUFFIX = re.compile(r"/chat/completions/?$")
_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0", "::1"}


def sanitize_url(base_url: str, model: str | None = None) -> str:
    """
    Normalize a provider base URL.

    Users often paste the full completions endpoint; the client wants the API
    root, so a trailing ``/chat/completions`` is removed.
    """
    url = (base_url or "").strip()
    url = _COMPLETIONS_SUFFIX.sub("", url)
    return url.rstrip("/")


def is_local_llm_server(base_url: str) -> bool:
    try:
        host = urlparse(base_url).hostname or ""
    except ValueError:
        return False
    return host in _LOCAL_HOSTS or ":11434" in base_url


def clean_thinking_tags(content: str, binding: str | None = None, model: str | None = None) -> str:
    """Remove ``<think>`` blocks emitted by reasoning models."""
    if not content:
        return content
    if model is not None and not has_thinking_tags(binding or "", model) and "<think>" not in content:
        return content
    return _THINK_BLOCK.sub("", content).strip()


__all__ = ["sanitize_url", "is_local_llm_server", "clean_thinking_tags"]
