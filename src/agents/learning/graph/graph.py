# -*- coding: utf-8 -*-
"""
Learning Dialogue Graph
=======================

Builds and compiles the LangGraph StateGraph that runs one learner turn.

The graph has no checkpointer: each invocation starts from the state the
caller passes in and returns the full state when it reaches END, which is
the only point where the dialogue waits for the learner.

Usage:
    from src.agents.learning.graph import build_learning_graph

    graph = build_learning_graph()
    state = await graph.ainvoke(state, config={"configurable": {"language": "en"}})
"""

from typing import Any

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph

from .nodes import assess, decide, guide, route_decision, route_entry, select_item
from .state import LearningGraphState


def build_learning_graph() -> Any:
    """
    Build the learning dialogue graph.

    Flow:
        START → route_node
          → no learner input: select_item → guide → END
          → learner input:    assess → decide
                                → "guide": guide → END
                                → "end":   END

    Returns:
        Compiled LangGraph graph ready for ainvoke().
    """
    workflow = StateGraph(LearningGraphState)

    # --- Add Nodes ---
    workflow.add_node("route_node", _passthrough)  # Routing entry point
    workflow.add_node("select_item", select_item)
    workflow.add_node("assess", assess)
    workflow.add_node("decide", decide)
    workflow.add_node("guide", guide)

    # --- Edges ---
    workflow.add_edge(START, "route_node")

    workflow.add_conditional_edges(
        "route_node",
        route_entry,
        {
            "select_item": "select_item",
            "assess": "assess",
        },
    )

    workflow.add_edge("select_item", "guide")
    workflow.add_edge("assess", "decide")

    workflow.add_conditional_edges(
        "decide",
        route_decision,
        {
            "guide": "guide",
            "end": END,
        },
    )

    # guide → END (wait for the learner)
    workflow.add_edge("guide", END)

    return workflow.compile()


async def _passthrough(state: LearningGraphState, config: RunnableConfig) -> dict:
    """Pass-through node used for routing."""
    return {}


__all__ = ["build_learning_graph"]
