from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from src.agents.learning import create_initial_state, resolve_active_item
from src.agents.learning.models import CognitiveLevel
from src.cli import interactive
from src.services.storage import SessionStore


@pytest.fixture
def store(tmp_path: Path):
    store = SessionStore(tmp_path / "sessions.sqlite")
    yield store
    store.close()


def _feed(monkeypatch: pytest.MonkeyPatch, *lines: str) -> None:
    answers = iter(lines)
    monkeypatch.setattr(interactive.Prompt, "ask", lambda *args, **kwargs: next(answers))


async def test_chat_loop_persists_every_turn(monkeypatch, store, graph_config, goal_agent):
    _feed(monkeypatch, "", "status", "我想学二分查找", "quit")

    await interactive._chat_loop(None, graph_config, store, "s1")

    state = store.load("s1")
    assert goal_agent.calls == ["我想学二分查找"]
    assert resolve_active_item(state).goal == "理解二分查找的原理"
    assert [m["role"] for m in state["messages"]] == ["assistant", "user", "assistant"]


async def test_chat_loop_stops_when_learner_can_transfer(monkeypatch, store, graph_config, assessment_agent):
    assessment_agent.labels = ["transferable"]
    _feed(monkeypatch, "我想学二分查找", "猜数字游戏里每次猜中间")

    await interactive._chat_loop(None, graph_config, store, "s1")

    state = store.load("s1")
    assert state["next_action"] == "end"
    assert resolve_active_item(state).current_level == CognitiveLevel.TRANSFERABLE


async def test_chat_loop_without_store(monkeypatch, graph_config, guide_agent):
    _feed(monkeypatch, "exit")

    await interactive._chat_loop(None, graph_config, None, None)

    assert len(guide_agent.calls) == 1


def test_sessions_command_lists_stored_sessions(monkeypatch, store):
    store.save("abc123", create_initial_state())
    monkeypatch.setattr(interactive, "get_session_store", lambda: store)

    result = CliRunner().invoke(interactive.app, ["sessions"])

    assert result.exit_code == 0
    assert "abc123" in result.output


def test_sessions_command_with_empty_store(monkeypatch, store):
    monkeypatch.setattr(interactive, "get_session_store", lambda: store)

    result = CliRunner().invoke(interactive.app, ["sessions"])

    assert result.exit_code == 0
    assert "No stored sessions" in result.output
