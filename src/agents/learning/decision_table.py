# -*- coding: utf-8 -*-
"""
Decision Table
==============

Maps an assessed cognitive-state label (and the current level) to the next
teaching intent and the level the evidence is consistent with.

Levels are set, not incremented: a later, less structured answer can move
the level back down.

A second table maps each label to the "missing parts" text shown in the
guidance header. The two tables answer different questions and stay separate.
Both are checked for completeness at import time.
"""

from dataclasses import dataclass
from typing import Callable

from .errors import ContractViolationError
from .models import CognitiveLevel, CognitiveStateLabel, TeachingIntent


@dataclass(frozen=True)
class TeachingDecision:
    next_intent: TeachingIntent
    new_level: CognitiveLevel


def _too_vague(level: CognitiveLevel) -> TeachingDecision:
    return TeachingDecision(TeachingIntent.ELICIT_INTUITION, CognitiveLevel.INTUITION_ONLY)


def _intuition_but_unclear(level: CognitiveLevel) -> TeachingDecision:
    if level == CognitiveLevel.INTUITION_ONLY:
        intent = TeachingIntent.FORCE_CLARIFICATION
    else:
        intent = TeachingIntent.ELICIT_INTUITION
    return TeachingDecision(intent, CognitiveLevel.INTUITION_ONLY)


def _can_describe_with_structure(level: CognitiveLevel) -> TeachingDecision:
    return TeachingDecision(TeachingIntent.INTRODUCE_STRUCTURE, CognitiveLevel.CAN_DESCRIBE)


def _fully_structured(level: CognitiveLevel) -> TeachingDecision:
    return TeachingDecision(TeachingIntent.TEST_TRANSFER, CognitiveLevel.STRUCTURED)


def _transferable(level: CognitiveLevel) -> TeachingDecision:
    return TeachingDecision(TeachingIntent.TEST_TRANSFER, CognitiveLevel.TRANSFERABLE)


DECISION_TABLE: dict[CognitiveStateLabel, Callable[[CognitiveLevel], TeachingDecision]] = {
    CognitiveStateLabel.TOO_VAGUE: _too_vague,
    CognitiveStateLabel.INTUITION_BUT_UNCLEAR: _intuition_but_unclear,
    CognitiveStateLabel.CAN_DESCRIBE_WITH_STRUCTURE: _can_describe_with_structure,
    CognitiveStateLabel.FULLY_STRUCTURED: _fully_structured,
    CognitiveStateLabel.TRANSFERABLE: _transferable,
}

MISSING_PARTS: dict[CognitiveStateLabel, str] = {
    CognitiveStateLabel.TOO_VAGUE: "needs a more specific expression",
    CognitiveStateLabel.INTUITION_BUT_UNCLEAR: "boundaries of the core concept and why it is indispensable",
    CognitiveStateLabel.CAN_DESCRIBE_WITH_STRUCTURE: "the concrete mechanisms behind the structure",
    CognitiveStateLabel.FULLY_STRUCTURED: "real application scenarios and good practice",
    CognitiveStateLabel.TRANSFERABLE: "none",
}


def _check_complete(table: dict, name: str) -> None:
    missing = [label.value for label in CognitiveStateLabel if label not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for labels: {missing}")


_check_complete(DECISION_TABLE, "DECISION_TABLE")
_check_complete(MISSING_PARTS, "MISSING_PARTS")


def _lookup(table: dict, label: CognitiveStateLabel):
    try:
        return table[CognitiveStateLabel(label)]
    except (KeyError, ValueError):
        raise ContractViolationError(f"Unknown cognitive state label: {label!r}") from None


def decide_next_step(label: CognitiveStateLabel, current_level: CognitiveLevel) -> TeachingDecision:
    """
    Decide the next teaching intent and level for an assessed answer.

    Raises:
        ContractViolationError: If ``label`` is not in the closed vocabulary
    """
    rule = _lookup(DECISION_TABLE, label)
    return rule(CognitiveLevel(current_level))


def missing_parts_for(label: CognitiveStateLabel) -> str:
    """Text describing what the learner is still missing at ``label``."""
    return _lookup(MISSING_PARTS, label)


__all__ = [
    "TeachingDecision",
    "DECISION_TABLE",
    "MISSING_PARTS",
    "decide_next_step",
    "missing_parts_for",
]
