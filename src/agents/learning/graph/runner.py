# -*- coding: utf-8 -*-
"""
Session runner: the two entry points a host calls between learner turns.

The caller keeps the returned state (in memory or via the session store)
and hands it back on the next turn.
"""

from typing import Any, Optional

from langchain_core.runnables import RunnableConfig

from .graph import build_learning_graph
from .state import LearningGraphState, create_initial_state

_default_graph: Optional[Any] = None


def get_learning_graph() -> Any:
    """The compiled graph shared by callers that do not bring their own."""
    global _default_graph
    if _default_graph is None:
        _default_graph = build_learning_graph()
    return _default_graph


async def start_session(
    state: Optional[LearningGraphState] = None,
    *,
    graph: Optional[Any] = None,
    config: Optional[RunnableConfig] = None,
) -> LearningGraphState:
    """Select (or create) the active item and produce the opening message."""
    new_state: LearningGraphState = dict(state) if state else create_initial_state()
    new_state["last_user_input"] = ""
    graph = graph or get_learning_graph()
    return await graph.ainvoke(new_state, config=config)


async def run_turn(
    state: LearningGraphState,
    user_input: str,
    *,
    graph: Optional[Any] = None,
    config: Optional[RunnableConfig] = None,
) -> LearningGraphState:
    """
    Run one learner turn: assess the input, decide, and guide unless done.

    Raises:
        ValueError: ``user_input`` is blank
    """
    if not (user_input or "").strip():
        raise ValueError("user_input must not be blank")

    new_state: LearningGraphState = dict(state)
    new_state["last_user_input"] = user_input
    new_state["messages"] = [
        *(state.get("messages") or []),
        {"role": "user", "content": user_input},
    ]
    graph = graph or get_learning_graph()
    return await graph.ainvoke(new_state, config=config)


def latest_assistant_message(state: LearningGraphState) -> Optional[str]:
    for message in reversed(state.get("messages") or []):
        if message["role"] == "assistant":
            return message["content"]
    return None


__all__ = [
    "get_learning_graph",
    "latest_assistant_message",
    "run_turn",
    "start_session",
]
