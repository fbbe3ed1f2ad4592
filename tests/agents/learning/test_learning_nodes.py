from __future__ import annotations

from src.agents.learning.errors import (
    AssessmentError,
    ContractViolationError,
    GoalExtractionError,
    GuidanceError,
)
from src.agents.learning.graph.nodes import (
    APOLOGY_MESSAGES,
    DEFAULT_GOALS,
    assess,
    decide,
    guide,
    route_decision,
    route_entry,
    select_item,
)
from src.agents.learning.graph.state import create_initial_state
from src.agents.learning.models import (
    AWAITING_TOPIC_GOAL,
    CognitiveLevel,
    CollectingInfo,
    Learning,
    LearningItem,
    TeachingIntent,
)


def _state(item: LearningItem | None, user_input: str = "") -> dict:
    state = create_initial_state()
    if item is not None:
        state["learning_items"] = {item.id: item}
        state["active_item_id"] = item.id
    state["last_user_input"] = user_input
    return state


def _updated(update: dict, item_id: str = "item_1") -> LearningItem:
    return update["learning_items"][item_id]


# ---------------------------------------------------------------------------
# select_item
# ---------------------------------------------------------------------------


async def test_select_item_creates_awaiting_item(graph_config):
    update = await select_item(create_initial_state(), graph_config)

    item_id = update["active_item_id"]
    assert item_id.startswith("item_")
    item = update["learning_items"][item_id]
    assert item.id == item_id
    assert item.goal == AWAITING_TOPIC_GOAL


async def test_select_item_is_idempotent(graph_config):
    item = LearningItem.create("item_1")
    assert await select_item(_state(item), graph_config) == {}


async def test_select_item_replaces_dangling_active_id(graph_config):
    state = create_initial_state()
    state["active_item_id"] = "item_missing"

    update = await select_item(state, graph_config)

    assert update["active_item_id"] != "item_missing"


# ---------------------------------------------------------------------------
# assess: first turn
# ---------------------------------------------------------------------------


async def test_first_input_sets_goal_and_collects_info(graph_config, goal_agent):
    item = LearningItem.create("item_1")

    update = await assess(_state(item, "我想学二分查找"), graph_config)

    updated = _updated(update)
    assert goal_agent.calls == ["我想学二分查找"]
    assert updated.goal == "理解二分查找的原理"
    assert updated.status.phase == "collecting_info"
    assert updated.status == CollectingInfo(has_basic_info=False)
    assert updated.evidence_count == 1
    assert updated.recent_evidence[0].content == "我想学二分查找"
    assert updated.recent_evidence[0].source == "user_input"
    assert updated.next_intent == TeachingIntent.ELICIT_INTUITION
    assert updated.cognitive_state.summary == "learner stated what they want to learn"
    assert updated.cognitive_state.missing_parts == "all core concepts"


async def test_goal_failure_uses_default_goal(graph_config, goal_agent):
    goal_agent.error = GoalExtractionError("provider down")
    item = LearningItem.create("item_1")

    updated = _updated(await assess(_state(item, "我想学二分查找"), graph_config))

    assert updated.goal == DEFAULT_GOALS["zh"]
    assert updated.status == CollectingInfo(has_basic_info=False)


# ---------------------------------------------------------------------------
# assess: later turns
# ---------------------------------------------------------------------------


async def test_unclear_intuition_at_level_one_forces_clarification(graph_config, make_item):
    item = make_item(level=CognitiveLevel.INTUITION_ONLY, evidence_count=1)

    updated = _updated(await assess(_state(item, "就是一半一半地找吧"), graph_config))

    assert updated.next_intent == TeachingIntent.FORCE_CLARIFICATION
    assert updated.current_level == CognitiveLevel.INTUITION_ONLY
    assert updated.cognitive_state.summary == "intuition_but_unclear"
    assert updated.evidence_count == 2
    assert updated.recent_evidence[-1].content == "就是一半一半地找吧"


async def test_transferable_answer_reaches_top_level_and_ends(graph_config, assessment_agent, make_item):
    assessment_agent.labels = ["transferable"]
    item = make_item(level=CognitiveLevel.STRUCTURED, evidence_count=3, status=Learning(has_basic_info=True))

    update = await assess(_state(item, "查字典也是同样的道理"), graph_config)
    updated = _updated(update)

    assert updated.next_intent == TeachingIntent.TEST_TRANSFER
    assert updated.current_level == CognitiveLevel.TRANSFERABLE
    assert updated.cognitive_state.missing_parts == "none"
    assert decide(_state(updated)) == {"next_action": "end"}


async def test_basic_info_is_judged_before_the_new_answer(graph_config, make_item):
    # specific goal: one prior answer is not enough, two are
    one = make_item(evidence_count=1, status=CollectingInfo(has_basic_info=False))
    two = make_item(evidence_count=2, status=CollectingInfo(has_basic_info=False))

    after_one = _updated(await assess(_state(one, "answer"), graph_config))
    after_two = _updated(await assess(_state(two, "answer"), graph_config))

    assert after_one.status == Learning(has_basic_info=False)
    assert after_two.status == Learning(has_basic_info=True)


async def test_failed_assessment_stalls_but_keeps_evidence(graph_config, assessment_agent, make_item):
    assessment_agent.error = AssessmentError("not json")
    item = make_item(
        level=CognitiveLevel.CAN_DESCRIBE,
        evidence_count=2,
        status=Learning(has_basic_info=True),
        intent=TeachingIntent.INTRODUCE_STRUCTURE,
    )

    updated = _updated(await assess(_state(item, "some answer"), graph_config))

    assert updated.evidence_count == 3
    assert updated.recent_evidence[-1].content == "some answer"
    assert updated.current_level == item.current_level
    assert updated.next_intent == item.next_intent
    assert updated.status == item.status
    assert updated.cognitive_state == item.cognitive_state
    assert updated.goal == item.goal


async def test_contract_violation_stalls_like_any_assessment_failure(graph_config, assessment_agent, make_item):
    assessment_agent.error = ContractViolationError("label 'kind_of' is not allowed")
    item = make_item(evidence_count=1)

    updated = _updated(await assess(_state(item, "answer"), graph_config))

    assert updated.evidence_count == 2
    assert updated.current_level == item.current_level
    assert updated.status == item.status


async def test_evidence_stays_bounded(graph_config, make_item):
    item = make_item(evidence_count=5, status=Learning(has_basic_info=True))

    updated = _updated(await assess(_state(item, "sixth"), graph_config))

    assert updated.evidence_count == 5
    assert [e.content for e in updated.recent_evidence] == [
        "answer 1", "answer 2", "answer 3", "answer 4", "sixth",
    ]


async def test_assess_without_active_item_is_noop(graph_config):
    assert await assess(_state(None, "hello"), graph_config) == {}


# ---------------------------------------------------------------------------
# decide
# ---------------------------------------------------------------------------


def test_decide_without_active_item_ends():
    assert decide(create_initial_state()) == {"next_action": "end"}


def test_decide_keeps_guiding_below_top_level(make_item):
    for level in (CognitiveLevel.INTUITION_ONLY, CognitiveLevel.CAN_DESCRIBE, CognitiveLevel.STRUCTURED):
        assert decide(_state(make_item(level=level))) == {"next_action": "guide"}


# ---------------------------------------------------------------------------
# guide
# ---------------------------------------------------------------------------


async def test_guide_appends_one_assistant_message(graph_config, guide_agent, make_item):
    item = make_item()
    state = _state(item)
    state["messages"] = [{"role": "user", "content": "hi"}]

    update = await guide(state, graph_config)

    assert update == {"messages": [{"role": "assistant", "content": f"[{item.next_intent.value}] {item.goal}"}]}
    assert guide_agent.calls[0][1] == [{"role": "user", "content": "hi"}]


async def test_guide_failure_sends_apology(graph_config, guide_agent, make_item):
    guide_agent.error = GuidanceError("timeout")

    update = await guide(_state(make_item()), graph_config)

    assert update["messages"] == [{"role": "assistant", "content": APOLOGY_MESSAGES["zh"]}]


async def test_guide_without_active_item_is_noop(graph_config, guide_agent):
    assert await guide(create_initial_state(), graph_config) == {}
    assert guide_agent.calls == []


# ---------------------------------------------------------------------------
# routing
# ---------------------------------------------------------------------------


def test_route_entry():
    assert route_entry(_state(None, "")) == "select_item"
    assert route_entry(_state(None, "   ")) == "select_item"
    assert route_entry(_state(None, "hello")) == "assess"


def test_route_decision():
    assert route_decision({"next_action": "end"}) == "end"
    assert route_decision({"next_action": "guide"}) == "guide"
