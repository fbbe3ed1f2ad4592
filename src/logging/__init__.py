# -*- coding: utf-8 -*-
"""
Logging
=======

Thin wrapper over the standard library ``logging`` module shared by every
module of the tutor, plus a small per-module LLM call counter.

Usage:
    from src.logging import get_logger

    logger = get_logger("LearningGraph")
    logger.info("Session started")
"""

from .logger import ROOT_LOGGER_NAME, configure_logging, get_logger, set_console_level
from .stats import LLMStats

__all__ = [
    "ROOT_LOGGER_NAME",
    "LLMStats",
    "configure_logging",
    "get_logger",
    "set_console_level",
]
