from __future__ import annotations

import json

import pytest

from src.agents.learning import models
from src.agents.learning.errors import LearningStateError
from src.agents.learning.graph import (
    build_learning_graph,
    deserialize_state,
    latest_assistant_message,
    resolve_active_item,
    run_turn,
    serialize_state,
    start_session,
)
from src.agents.learning.models import (
    AWAITING_TOPIC_GOAL,
    CognitiveLevel,
    LearningItem,
    TeachingIntent,
)


@pytest.fixture
def graph():
    return build_learning_graph()


async def test_start_session_creates_item_and_greets(graph, graph_config, guide_agent):
    state = await start_session(graph=graph, config=graph_config)

    item = resolve_active_item(state)
    assert item is not None
    assert item.goal == AWAITING_TOPIC_GOAL
    assert state["next_action"] == "guide"
    assert state["messages"] == [
        {"role": "assistant", "content": f"[elicit_intuition] {AWAITING_TOPIC_GOAL}"},
    ]
    assert len(guide_agent.calls) == 1


async def test_start_session_twice_reuses_item(graph, graph_config):
    state = await start_session(graph=graph, config=graph_config)
    again = await start_session(state, graph=graph, config=graph_config)

    assert again["active_item_id"] == state["active_item_id"]
    assert len(again["learning_items"]) == 1
    assert len(again["messages"]) == 2


async def test_dialogue_runs_until_transfer(graph, graph_config, assessment_agent, guide_agent):
    assessment_agent.labels = [
        "intuition_but_unclear",
        "can_describe_with_structure",
        "fully_structured",
        "transferable",
    ]
    state = await start_session(graph=graph, config=graph_config)

    state = await run_turn(state, "我想学二分查找", graph=graph, config=graph_config)
    item = resolve_active_item(state)
    assert item.goal == "理解二分查找的原理"
    assert assessment_agent.calls == []
    assert latest_assistant_message(state) == "[elicit_intuition] 理解二分查找的原理"

    expected = [
        (CognitiveLevel.INTUITION_ONLY, TeachingIntent.FORCE_CLARIFICATION),
        (CognitiveLevel.CAN_DESCRIBE, TeachingIntent.INTRODUCE_STRUCTURE),
        (CognitiveLevel.STRUCTURED, TeachingIntent.TEST_TRANSFER),
    ]
    for n, (level, intent) in enumerate(expected, start=1):
        state = await run_turn(state, f"answer {n}", graph=graph, config=graph_config)
        item = resolve_active_item(state)
        assert item.current_level == level
        assert item.next_intent == intent
        assert state["next_action"] == "guide"
        assert latest_assistant_message(state) == f"[{intent.value}] 理解二分查找的原理"

    state = await run_turn(state, "answer 4", graph=graph, config=graph_config)

    item = resolve_active_item(state)
    assert item.current_level == CognitiveLevel.TRANSFERABLE
    assert state["next_action"] == "end"
    assert state["messages"][-1] == {"role": "user", "content": "answer 4"}
    assert len(guide_agent.calls) == 5
    assert item.evidence_count == 5


async def test_messages_are_appended_in_order(graph, graph_config):
    state = await start_session(graph=graph, config=graph_config)
    state = await run_turn(state, "我想学二分查找", graph=graph, config=graph_config)
    state = await run_turn(state, "从中间开始比较", graph=graph, config=graph_config)

    assert [m["role"] for m in state["messages"]] == [
        "assistant", "user", "assistant", "user", "assistant",
    ]
    assert state["messages"][3]["content"] == "从中间开始比较"


async def test_other_items_survive_a_turn(graph, graph_config):
    state = await start_session(graph=graph, config=graph_config)
    parked = LearningItem.create("item_parked")
    state["learning_items"] = {**state["learning_items"], parked.id: parked}

    state = await run_turn(state, "我想学二分查找", graph=graph, config=graph_config)

    assert state["learning_items"]["item_parked"] == parked
    assert len(state["learning_items"]) == 2


async def test_run_turn_rejects_blank_input(graph, graph_config):
    state = await start_session(graph=graph, config=graph_config)
    with pytest.raises(ValueError):
        await run_turn(state, "   ", graph=graph, config=graph_config)


async def test_run_turn_keeps_learner_text_verbatim(graph, graph_config, goal_agent, assessment_agent):
    state = await start_session(graph=graph, config=graph_config)
    state = await run_turn(state, "  我想学二分查找\n", graph=graph, config=graph_config)
    state = await run_turn(state, "  从中间开始比较  ", graph=graph, config=graph_config)

    item = resolve_active_item(state)
    assert goal_agent.calls == ["  我想学二分查找\n"]
    assert assessment_agent.calls[0][0] == "  从中间开始比较  "
    assert [e.content for e in item.recent_evidence] == ["  我想学二分查找\n", "  从中间开始比较  "]
    assert state["messages"][1]["content"] == "  我想学二分查找\n"
    assert state["messages"][3]["content"] == "  从中间开始比较  "


async def test_round_trip_then_resume_matches_direct_resume(graph, graph_config, monkeypatch):
    monkeypatch.setattr(models, "_now_ms", lambda: 1_700_000_000_000)

    state = await start_session(graph=graph, config=graph_config)
    state = await run_turn(state, "我想学二分查找", graph=graph, config=graph_config)

    restored = deserialize_state(json.loads(json.dumps(serialize_state(state))))
    assert serialize_state(restored) == serialize_state(state)
    assert resolve_active_item(restored) == resolve_active_item(state)

    direct = await run_turn(state, "就是每次砍一半", graph=graph, config=graph_config)
    resumed = await run_turn(restored, "就是每次砍一半", graph=graph, config=graph_config)

    assert serialize_state(resumed) == serialize_state(direct)


def test_deserialize_rejects_dangling_active_item():
    data = serialize_state(
        {
            "learning_items": {"item_1": LearningItem.create("item_1")},
            "active_item_id": "item_2",
            "last_user_input": "",
            "messages": [],
            "next_action": "guide",
        }
    )
    with pytest.raises(LearningStateError):
        deserialize_state(data)


def test_deserialize_rejects_invalid_item_and_action():
    good = serialize_state(
        {
            "learning_items": {"item_1": LearningItem.create("item_1")},
            "active_item_id": "item_1",
            "messages": [],
            "next_action": "guide",
        }
    )

    bad_level = json.loads(json.dumps(good))
    bad_level["learning_items"]["item_1"]["current_level"] = 7
    with pytest.raises(LearningStateError):
        deserialize_state(bad_level)

    with pytest.raises(LearningStateError):
        deserialize_state({**good, "next_action": "pause"})
