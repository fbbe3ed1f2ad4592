"""
Learning Dialogue API Router
============================

Session creation and turn-by-turn interaction with the cognitive-level tutor.
The graph state of each session lives in the session store between requests.
Turns of one session run one at a time so no turn overwrites another.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from langchain_core.runnables import RunnableConfig
from pydantic import BaseModel, field_validator

from src.agents.base_agent import BaseAgent
from src.agents.learning import (
    LearningGraphState,
    LearningStateError,
    latest_assistant_message,
    resolve_active_item,
    run_turn,
    start_session,
)
from src.api.dependencies.learning import get_graph_config, get_session_store
from src.logging import get_logger
from src.services.storage import SessionStore, new_session_id

router = APIRouter()

logger = get_logger("Learning")

# Per-session turn locks, keyed by session id
_session_locks: dict[str, asyncio.Lock] = {}


# === Request/Response Models ===


class MessageRequest(BaseModel):
    """Learner message"""

    message: str

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class TurnResponse(BaseModel):
    session_id: str
    message: str | None
    next_action: str
    item: dict[str, Any] | None


class SessionResponse(BaseModel):
    session_id: str
    next_action: str
    item: dict[str, Any] | None
    messages: list[dict[str, str]]


# === Helpers ===


def _item_payload(state: LearningGraphState) -> dict[str, Any] | None:
    item = resolve_active_item(state)
    return item.model_dump(mode="json") if item is not None else None


def _session_lock(session_id: str) -> asyncio.Lock:
    lock = _session_locks.get(session_id)
    if lock is None:
        lock = _session_locks[session_id] = asyncio.Lock()
    return lock


def _turn_response(session_id: str, state: LearningGraphState) -> TurnResponse:
    # A turn that ends the session produces no tutor message
    messages = state.get("messages") or []
    message = None
    if messages and messages[-1]["role"] == "assistant":
        message = latest_assistant_message(state)
    return TurnResponse(
        session_id=session_id,
        message=message,
        next_action=state.get("next_action", "guide"),
        item=_item_payload(state),
    )


def _load_state(store: SessionStore, session_id: str) -> LearningGraphState:
    try:
        state = store.load(session_id)
    except LearningStateError as e:
        logger.error(f"Session {session_id} is corrupt: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Session state is corrupt",
        )
    if state is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return state


# === REST API Endpoints ===


@router.post("/sessions", response_model=TurnResponse)
async def create_session(
    store: SessionStore = Depends(get_session_store),
    config: RunnableConfig = Depends(get_graph_config),
):
    """
    Start a new learning session.

    Returns:
        The opening tutor message and the freshly created learning item.
    """
    BaseAgent.reset_stats("learning")

    session_id = new_session_id()
    try:
        state = await start_session(config=config)
    except Exception as e:
        logger.error(f"Create session failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start learning session",
        )

    store.save(session_id, state)
    logger.info(f"Session created: {session_id}")
    return _turn_response(session_id, state)


@router.post("/sessions/{session_id}/messages", response_model=TurnResponse)
async def send_message(
    session_id: str,
    request: MessageRequest,
    store: SessionStore = Depends(get_session_store),
    config: RunnableConfig = Depends(get_graph_config),
):
    """
    Run one learner turn.

    Returns 409 once the session has ended. Concurrent messages to the same
    session are processed one after another.
    """
    async with _session_lock(session_id):
        state = _load_state(store, session_id)
        if state.get("next_action") == "end":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Session has ended")

        try:
            state = await run_turn(state, request.message, config=config)
        except Exception as e:
            logger.error(f"[{session_id}] Turn failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to process message",
            )

        store.save(session_id, state)
    if state.get("next_action") == "end":
        logger.info(f"[{session_id}] Session ended")
        BaseAgent.print_stats("learning")
    return _turn_response(session_id, state)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    state = _load_state(store, session_id)
    return SessionResponse(
        session_id=session_id,
        next_action=state.get("next_action", "guide"),
        item=_item_payload(state),
        messages=[dict(m) for m in state.get("messages") or []],
    )


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    async with _session_lock(session_id):
        deleted = store.delete(session_id)
    _session_locks.pop(session_id, None)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return {"session_id": session_id, "deleted": True}
