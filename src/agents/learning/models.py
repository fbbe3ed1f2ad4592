# -*- coding: utf-8 -*-
"""
Learning Data Model
===================

Entities and vocabularies of the cognitive-level tutoring dialogue.

- ``CognitiveLevel``: ordinal 1-4 stage of demonstrated understanding
- ``CognitiveStateLabel``: closed output vocabulary of the assessment
- ``TeachingIntent``: the next pedagogical action stored on an item
- ``TeachingPhase``: derived view used to pick a prompt template, never stored
- ``LearningItemStatus``: tagged union; ``has_basic_info`` only exists once a
  topic is known
- ``LearningItem``: the per-topic record, immutable; updates are copies
"""

from __future__ import annotations

from enum import Enum, IntEnum
import time
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

MAX_EVIDENCE_COUNT = 5

AWAITING_TOPIC_GOAL = "awaiting a learning topic"

INITIAL_SUMMARY = "not assessed yet"
INITIAL_MISSING_PARTS = "everything"


class CognitiveLevel(IntEnum):
    INTUITION_ONLY = 1  # has an intuition but cannot put it into words
    CAN_DESCRIBE = 2  # can describe it, structure still loose
    STRUCTURED = 3  # can express it with a clear structure
    TRANSFERABLE = 4  # can transfer, apply and make analogies


class CognitiveStateLabel(str, Enum):
    TOO_VAGUE = "too_vague"
    INTUITION_BUT_UNCLEAR = "intuition_but_unclear"
    CAN_DESCRIBE_WITH_STRUCTURE = "can_describe_with_structure"
    FULLY_STRUCTURED = "fully_structured"
    TRANSFERABLE = "transferable"


class TeachingIntent(str, Enum):
    ELICIT_INTUITION = "elicit_intuition"
    FORCE_CLARIFICATION = "force_clarification"
    INTRODUCE_STRUCTURE = "introduce_structure"
    TEST_TRANSFER = "test_transfer"


class TeachingPhase(str, Enum):
    INFO_COLLECTION = "info_collection"
    UNDERSTANDING = "understanding"
    CLARIFICATION = "clarification"
    STRUCTURED = "structured"
    TRANSFER = "transfer"


# ---------------------------------------------------------------------------
# Evidence
# ---------------------------------------------------------------------------

EvidenceSource = Literal["user_input", "assessment"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class Evidence(BaseModel):
    """A timestamped piece of learner text or system assessment."""

    model_config = ConfigDict(frozen=True)

    source: EvidenceSource
    content: str
    timestamp: int = Field(default_factory=lambda: _now_ms())


def append_evidence(evidence: list[Evidence], entry: Evidence) -> list[Evidence]:
    """Return a new list with ``entry`` appended, keeping the newest MAX_EVIDENCE_COUNT."""
    return [*evidence, entry][-MAX_EVIDENCE_COUNT:]


class CognitiveState(BaseModel):
    """Current belief about the learner. Replaced wholesale on each assessment."""

    model_config = ConfigDict(frozen=True)

    summary: str
    missing_parts: str | None = None
    misconceptions: list[str] | None = None


# ---------------------------------------------------------------------------
# Status (tagged union on ``phase``)
# ---------------------------------------------------------------------------


class AwaitingTopic(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    phase: Literal["awaiting_topic"] = "awaiting_topic"


class CollectingInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    phase: Literal["collecting_info"] = "collecting_info"
    has_basic_info: bool


class Learning(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    phase: Literal["learning"] = "learning"
    has_basic_info: bool


LearningItemStatus = Annotated[
    Union[AwaitingTopic, CollectingInfo, Learning],
    Field(discriminator="phase"),
]


def status_has_basic_info(status: AwaitingTopic | CollectingInfo | Learning) -> bool:
    """Whether the status reports basic info; an awaiting item never does."""
    if isinstance(status, AwaitingTopic):
        return False
    if isinstance(status, (CollectingInfo, Learning)):
        return status.has_basic_info
    raise TypeError(f"Unhandled learning item status: {status!r}")


# ---------------------------------------------------------------------------
# Learning item
# ---------------------------------------------------------------------------


class LearningItem(BaseModel):
    """Per-topic pedagogical state. At most one is active per session."""

    model_config = ConfigDict(frozen=True)

    id: str
    goal: str
    current_level: CognitiveLevel = CognitiveLevel.INTUITION_ONLY
    cognitive_state: CognitiveState
    recent_evidence: list[Evidence] = Field(default_factory=list, max_length=MAX_EVIDENCE_COUNT)
    next_intent: TeachingIntent = TeachingIntent.ELICIT_INTUITION
    status: LearningItemStatus = Field(default_factory=AwaitingTopic)

    @classmethod
    def create(cls, item_id: str) -> "LearningItem":
        """A fresh item waiting for the learner to name a topic."""
        return cls(
            id=item_id,
            goal=AWAITING_TOPIC_GOAL,
            current_level=CognitiveLevel.INTUITION_ONLY,
            cognitive_state=CognitiveState(
                summary=INITIAL_SUMMARY,
                missing_parts=INITIAL_MISSING_PARTS,
            ),
            recent_evidence=[],
            next_intent=TeachingIntent.ELICIT_INTUITION,
            status=AwaitingTopic(),
        )

    @property
    def is_awaiting_topic(self) -> bool:
        return self.goal == AWAITING_TOPIC_GOAL

    @property
    def evidence_count(self) -> int:
        return len(self.recent_evidence)


__all__ = [
    "MAX_EVIDENCE_COUNT",
    "AWAITING_TOPIC_GOAL",
    "CognitiveLevel",
    "CognitiveStateLabel",
    "TeachingIntent",
    "TeachingPhase",
    "Evidence",
    "EvidenceSource",
    "append_evidence",
    "CognitiveState",
    "AwaitingTopic",
    "CollectingInfo",
    "Learning",
    "LearningItemStatus",
    "status_has_basic_info",
    "LearningItem",
]
