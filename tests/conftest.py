from __future__ import annotations

from typing import Any, Callable

import pytest

from src.agents.learning.agents.assessment_agent import AssessmentResult
from src.agents.learning.errors import CollaboratorError
from src.agents.learning.models import (
    AWAITING_TOPIC_GOAL,
    AwaitingTopic,
    CognitiveLevel,
    CognitiveState,
    CollectingInfo,
    Evidence,
    LearningItem,
    TeachingIntent,
)


class FakeGoalAgent:
    def __init__(self, goal: str = "理解二分查找的原理", error: CollaboratorError | None = None) -> None:
        self.goal = goal
        self.error = error
        self.calls: list[str] = []

    async def process(self, user_input: str) -> str:
        self.calls.append(user_input)
        if self.error is not None:
            raise self.error
        return self.goal


class FakeAssessmentAgent:
    """Returns queued labels in order; the last one repeats."""

    def __init__(self, labels: list[str] | None = None, error: CollaboratorError | None = None) -> None:
        self.labels = list(labels or ["intuition_but_unclear"])
        self.error = error
        self.calls: list[tuple[str, LearningItem]] = []

    async def process(self, answer: str, item: LearningItem) -> AssessmentResult:
        self.calls.append((answer, item))
        if self.error is not None:
            raise self.error
        label = self.labels.pop(0) if len(self.labels) > 1 else self.labels[0]
        return AssessmentResult(cognitive_state=label, reasoning="fake reasoning")


class FakeGuideAgent:
    def __init__(self, error: CollaboratorError | None = None) -> None:
        self.error = error
        self.calls: list[tuple[LearningItem, list[dict[str, str]]]] = []

    async def process(self, item: LearningItem, messages: list[dict[str, str]], temperature=None) -> str:
        self.calls.append((item, list(messages)))
        if self.error is not None:
            raise self.error
        return f"[{item.next_intent.value}] {item.goal}"


@pytest.fixture
def goal_agent() -> FakeGoalAgent:
    return FakeGoalAgent()


@pytest.fixture
def assessment_agent() -> FakeAssessmentAgent:
    return FakeAssessmentAgent()


@pytest.fixture
def guide_agent() -> FakeGuideAgent:
    return FakeGuideAgent()


@pytest.fixture
def graph_config(goal_agent, assessment_agent, guide_agent) -> dict[str, Any]:
    return {
        "configurable": {
            "language": "zh",
            "goal_agent": goal_agent,
            "assessment_agent": assessment_agent,
            "guide_agent": guide_agent,
        }
    }


@pytest.fixture
def make_item() -> Callable[..., LearningItem]:
    """Build a learning item with ``evidence_count`` user answers."""

    def _make(
        *,
        goal: str = "理解二分查找的原理以及它适用的前提条件和边界",
        level: CognitiveLevel = CognitiveLevel.INTUITION_ONLY,
        evidence_count: int = 1,
        status: Any = None,
        intent: TeachingIntent = TeachingIntent.ELICIT_INTUITION,
        item_id: str = "item_1",
    ) -> LearningItem:
        if status is None:
            status = AwaitingTopic() if goal == AWAITING_TOPIC_GOAL else CollectingInfo(has_basic_info=False)
        return LearningItem(
            id=item_id,
            goal=goal,
            current_level=level,
            cognitive_state=CognitiveState(summary="intuition_but_unclear", missing_parts="edge cases"),
            recent_evidence=[
                Evidence(source="user_input", content=f"answer {i}", timestamp=1_700_000_000_000 + i)
                for i in range(evidence_count)
            ],
            next_intent=intent,
            status=status,
        )

    return _make

