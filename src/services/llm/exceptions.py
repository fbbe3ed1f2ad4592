# -*- coding: utf-8 -*-
"""
LLM Exceptions
==============

Errors raised by the LLM service layer. Everything derives from ``LLMError`` so
callers can absorb provider failures with a single ``except`` clause.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base class for LLM service errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class LLMConfigError(LLMError):
    """The LLM is not configured (missing model, package, ...)."""


class LLMAPIError(LLMError):
    """The provider call failed or returned an unusable response."""


class LLMAuthenticationError(LLMAPIError):
    """The provider rejected the credentials."""


class LLMRateLimitError(LLMAPIError):
    """The provider throttled the request."""


__all__ = [
    "LLMError",
    "LLMConfigError",
    "LLMAPIError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
]
