# -*- coding: utf-8 -*-
"""
Learning Dialogue Graph
=======================

LangGraph-based orchestration of the cognitive-level tutoring dialogue.

Usage:
    from src.agents.learning.graph import start_session, run_turn

    state = await start_session(config={"configurable": {"language": "en"}})
    state = await run_turn(state, "I want to learn binary search")
"""

from .graph import build_learning_graph
from .runner import get_learning_graph, latest_assistant_message, run_turn, start_session
from .state import (
    ChatMessage,
    LearningGraphState,
    create_initial_state,
    deserialize_state,
    resolve_active_item,
    serialize_state,
)

__all__ = [
    "build_learning_graph",
    "get_learning_graph",
    "start_session",
    "run_turn",
    "latest_assistant_message",
    "ChatMessage",
    "LearningGraphState",
    "create_initial_state",
    "serialize_state",
    "deserialize_state",
    "resolve_active_item",
]
