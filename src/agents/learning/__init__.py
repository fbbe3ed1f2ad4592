# -*- coding: utf-8 -*-
"""
Learning Module
===============

Cognitive-level tutoring dialogue: a learner is moved through four levels of
understanding a single goal, one assessed answer at a time.

Usage:
    from src.agents.learning import run_turn, start_session

    state = await start_session()
    state = await run_turn(state, "我想学二分查找")
"""

from .decision_table import TeachingDecision, decide_next_step, missing_parts_for
from .errors import (
    AssessmentError,
    CollaboratorError,
    ContractViolationError,
    GoalExtractionError,
    GuidanceError,
    LearningStateError,
)
from .graph import (
    LearningGraphState,
    build_learning_graph,
    create_initial_state,
    deserialize_state,
    latest_assistant_message,
    resolve_active_item,
    run_turn,
    serialize_state,
    start_session,
)
from .models import (
    MAX_EVIDENCE_COUNT,
    CognitiveLevel,
    CognitiveState,
    CognitiveStateLabel,
    Evidence,
    LearningItem,
    TeachingIntent,
    TeachingPhase,
)
from .phase_detector import determine_teaching_phase, has_collected_basic_info

__all__ = [
    "AssessmentError",
    "CognitiveLevel",
    "CognitiveState",
    "CognitiveStateLabel",
    "CollaboratorError",
    "ContractViolationError",
    "Evidence",
    "GoalExtractionError",
    "GuidanceError",
    "LearningGraphState",
    "LearningItem",
    "LearningStateError",
    "MAX_EVIDENCE_COUNT",
    "TeachingDecision",
    "TeachingIntent",
    "TeachingPhase",
    "build_learning_graph",
    "create_initial_state",
    "decide_next_step",
    "deserialize_state",
    "determine_teaching_phase",
    "has_collected_basic_info",
    "latest_assistant_message",
    "missing_parts_for",
    "resolve_active_item",
    "run_turn",
    "serialize_state",
    "start_session",
]
