# -*- coding: utf-8 -*-
"""
Teaching Phase Detector
=======================

Maps a learning item onto the teaching phase that selects the guidance
prompt. Pure functions; no state is kept between calls.
"""

from .models import (
    AWAITING_TOPIC_GOAL,
    CognitiveLevel,
    LearningItem,
    TeachingPhase,
    status_has_basic_info,
)

# Evidence count up to which an item without basic info stays in info collection
INFO_COLLECTION_MAX_EVIDENCE = 2

# Evidence count up to which a level-1 learner is asked to self-report
UNDERSTANDING_MAX_EVIDENCE = 3

# A goal longer than this is considered specific enough to count as basic info
SPECIFIC_GOAL_MIN_LENGTH = 20

# Minimum evidence for the goal heuristic in has_collected_basic_info
HEURISTIC_MIN_EVIDENCE = 2

LEVEL_TO_PHASE: dict[CognitiveLevel, TeachingPhase] = {
    CognitiveLevel.INTUITION_ONLY: TeachingPhase.UNDERSTANDING,
    CognitiveLevel.CAN_DESCRIBE: TeachingPhase.STRUCTURED,
    CognitiveLevel.STRUCTURED: TeachingPhase.TRANSFER,
    CognitiveLevel.TRANSFERABLE: TeachingPhase.TRANSFER,
}

_missing_levels = set(CognitiveLevel) - set(LEVEL_TO_PHASE)
if _missing_levels:
    raise RuntimeError(f"LEVEL_TO_PHASE has no entry for {sorted(_missing_levels)}")


def determine_teaching_phase(item: LearningItem) -> TeachingPhase:
    """
    Decide which teaching phase the item is in.

    Priority:
    1. No basic info reported by the status and little evidence → info collection
    2. Level 1 → understanding while evidence is short, clarification after
    3. Otherwise the fixed level → phase table
    """
    evidence_count = item.evidence_count

    if not status_has_basic_info(item.status) and evidence_count <= INFO_COLLECTION_MAX_EVIDENCE:
        return TeachingPhase.INFO_COLLECTION

    if item.current_level == CognitiveLevel.INTUITION_ONLY:
        if evidence_count <= UNDERSTANDING_MAX_EVIDENCE:
            return TeachingPhase.UNDERSTANDING
        return TeachingPhase.CLARIFICATION

    return LEVEL_TO_PHASE[item.current_level]


def is_goal_specific(goal: str) -> bool:
    return goal != AWAITING_TOPIC_GOAL and len(goal) > SPECIFIC_GOAL_MIN_LENGTH


def has_collected_basic_info(item: LearningItem) -> bool:
    """
    Whether enough basic info (subject, scope, ...) has been gathered.

    Trusts the status flag when it is set; otherwise a specific goal plus a
    couple of learner turns counts as basic info.
    """
    if status_has_basic_info(item.status):
        return True
    return is_goal_specific(item.goal) and item.evidence_count >= HEURISTIC_MIN_EVIDENCE


__all__ = [
    "INFO_COLLECTION_MAX_EVIDENCE",
    "UNDERSTANDING_MAX_EVIDENCE",
    "SPECIFIC_GOAL_MIN_LENGTH",
    "LEVEL_TO_PHASE",
    "determine_teaching_phase",
    "has_collected_basic_info",
    "is_goal_specific",
]
