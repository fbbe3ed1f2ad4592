# -*- coding: utf-8 -*-
"""
Learning Graph Nodes
====================

Node functions for the learning dialogue graph. Each node reads the state,
calls at most one collaborator agent and returns a partial state update.

Collaborator failures never leave a node:
- goal extraction → a default goal
- assessment → the turn stalls (evidence kept, nothing else changes)
- guidance → a fixed apology message
"""

import time
from typing import Any, Callable

from langchain_core.runnables import RunnableConfig

from src.logging import get_logger

from ..decision_table import decide_next_step, missing_parts_for
from ..errors import AssessmentError, GoalExtractionError, GuidanceError
from ..models import (
    CognitiveLevel,
    CognitiveState,
    CollectingInfo,
    Evidence,
    Learning,
    LearningItem,
    TeachingIntent,
    append_evidence,
)
from ..phase_detector import has_collected_basic_info
from .state import LearningGraphState, resolve_active_item

logger = get_logger("LearningGraph")

DEFAULT_LANGUAGE = "zh"

DEFAULT_GOALS = {
    "zh": "掌握学生提到的主题的基础知识",
    "en": "Master the fundamentals of the topic the learner mentioned",
}

APOLOGY_MESSAGES = {
    "zh": "抱歉，我这边出了点问题，没能给出回应。可以再说一次你的想法吗？",
    "en": "Sorry, something went wrong on my side. Could you share your thoughts again?",
}

FIRST_TURN_SUMMARY = "learner stated what they want to learn"
FIRST_TURN_MISSING_PARTS = "all core concepts"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _language(config: RunnableConfig) -> str:
    return (config or {}).get("configurable", {}).get("language", DEFAULT_LANGUAGE)


def _localized(table: dict[str, str], language: str) -> str:
    return table.get(language, table[DEFAULT_LANGUAGE])


def _get_agent(config: RunnableConfig, key: str, factory: Callable[..., Any]) -> Any:
    """Use the agent injected under ``configurable[key]`` or build one."""
    agent = (config or {}).get("configurable", {}).get(key)
    if agent is None:
        agent = factory(language=_language(config))
    return agent


# ---------------------------------------------------------------------------
# Select
# ---------------------------------------------------------------------------


async def select_item(state: LearningGraphState, config: RunnableConfig) -> dict:
    """Make sure an active learning item exists."""
    if resolve_active_item(state) is not None:
        logger.debug(f"[select_item] Reusing active item {state.get('active_item_id')}")
        return {}

    item_id = f"item_{int(time.time() * 1000)}"
    logger.info(f"[select_item] Created learning item {item_id}")
    return {
        "active_item_id": item_id,
        "learning_items": {item_id: LearningItem.create(item_id)},
    }


# ---------------------------------------------------------------------------
# Assess
# ---------------------------------------------------------------------------


async def _record_topic(
    item: LearningItem, user_input: str, config: RunnableConfig
) -> LearningItem:
    from ..agents.goal_agent import GoalAgent

    agent = _get_agent(config, "goal_agent", GoalAgent)
    try:
        goal = await agent.process(user_input)
    except GoalExtractionError as e:
        goal = _localized(DEFAULT_GOALS, _language(config))
        logger.warning(f"[assess] Goal extraction failed, using default goal: {e}")

    logger.info(f"[assess] Learning goal: {goal}")
    return item.model_copy(
        update={
            "goal": goal,
            "cognitive_state": CognitiveState(
                summary=FIRST_TURN_SUMMARY,
                missing_parts=FIRST_TURN_MISSING_PARTS,
            ),
            "recent_evidence": [Evidence(source="user_input", content=user_input)],
            "next_intent": TeachingIntent.ELICIT_INTUITION,
            "status": CollectingInfo(has_basic_info=False),
        }
    )


async def _assess_answer(
    item: LearningItem, user_input: str, config: RunnableConfig
) -> LearningItem:
    from ..agents.assessment_agent import AssessmentAgent

    evidence = append_evidence(
        item.recent_evidence, Evidence(source="user_input", content=user_input)
    )

    agent = _get_agent(config, "assessment_agent", AssessmentAgent)
    try:
        result = await agent.process(user_input, item)
        label = result.cognitive_state
        decision = decide_next_step(label, item.current_level)
        missing_parts = missing_parts_for(label)
    except AssessmentError as e:
        logger.warning(f"[assess] Assessment failed, keeping current state: {e}")
        return item.model_copy(update={"recent_evidence": evidence})

    has_basic_info = has_collected_basic_info(item)

    logger.info(
        f"[assess] {label.value}: level {item.current_level.value} → "
        f"{decision.new_level.value}, intent {decision.next_intent.value}"
    )
    logger.debug(f"[assess] Reasoning: {result.reasoning}")

    return item.model_copy(
        update={
            "current_level": decision.new_level,
            "cognitive_state": CognitiveState(
                summary=label.value,
                missing_parts=missing_parts,
            ),
            "recent_evidence": evidence,
            "next_intent": decision.next_intent,
            "status": Learning(has_basic_info=has_basic_info),
        }
    )


async def assess(state: LearningGraphState, config: RunnableConfig) -> dict:
    """Interpret the learner's latest input and update the active item."""
    item = resolve_active_item(state)
    if item is None:
        logger.warning("[assess] No active learning item")
        return {}

    user_input = state.get("last_user_input", "")
    if item.is_awaiting_topic and item.evidence_count == 0:
        updated = await _record_topic(item, user_input, config)
    else:
        updated = await _assess_answer(item, user_input, config)

    return {"learning_items": {item.id: updated}}


# ---------------------------------------------------------------------------
# Decide
# ---------------------------------------------------------------------------


def decide(state: LearningGraphState) -> dict:
    """End the dialogue once the learner can transfer; otherwise keep guiding."""
    item = resolve_active_item(state)
    if item is None:
        logger.info("[decide] No active learning item, ending")
        return {"next_action": "end"}

    if item.current_level >= CognitiveLevel.TRANSFERABLE:
        logger.info("[decide] Learner reached the transferable level, ending")
        return {"next_action": "end"}

    return {"next_action": "guide"}


# ---------------------------------------------------------------------------
# Guide
# ---------------------------------------------------------------------------


async def guide(state: LearningGraphState, config: RunnableConfig) -> dict:
    """Append the next tutor message."""
    from ..agents.guide_agent import GuideAgent

    item = resolve_active_item(state)
    if item is None:
        logger.warning("[guide] No active learning item")
        return {}

    agent = _get_agent(config, "guide_agent", GuideAgent)
    try:
        message = await agent.process(item, state.get("messages") or [])
    except GuidanceError as e:
        logger.error(f"[guide] Guidance failed: {e}")
        message = _localized(APOLOGY_MESSAGES, _language(config))

    return {"messages": [{"role": "assistant", "content": message}]}


# ---------------------------------------------------------------------------
# Routing Functions
# ---------------------------------------------------------------------------


def route_entry(state: LearningGraphState) -> str:
    """A turn with learner input is assessed; otherwise an item is selected."""
    if (state.get("last_user_input") or "").strip():
        return "assess"
    return "select_item"


def route_decision(state: LearningGraphState) -> str:
    return state.get("next_action", "guide")


__all__ = [
    "APOLOGY_MESSAGES",
    "DEFAULT_GOALS",
    "assess",
    "decide",
    "guide",
    "route_decision",
    "route_entry",
    "select_item",
]
