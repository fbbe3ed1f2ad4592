# -*- coding: utf-8 -*-
"""
Learning Graph State Definitions
================================

TypedDict state schema for the learning dialogue graph, plus JSON
(de)serialization so the caller can persist state between turns.
"""

import operator
from typing import Annotated, Any, Literal, Optional, TypedDict

from pydantic import ValidationError

from ..errors import LearningStateError
from ..models import LearningItem

NextAction = Literal["guide", "end"]
NEXT_ACTIONS = ("guide", "end")


class ChatMessage(TypedDict):
    role: Literal["user", "assistant"]
    content: str


def merge_learning_items(
    left: Optional[dict[str, LearningItem]],
    right: Optional[dict[str, LearningItem]],
) -> dict[str, LearningItem]:
    """Reducer: node updates replace items by id, other items are kept."""
    return {**(left or {}), **(right or {})}


class LearningGraphState(TypedDict, total=False):
    """State for the learning dialogue graph."""

    # --- Items ---
    learning_items: Annotated[dict[str, LearningItem], merge_learning_items]
    active_item_id: Optional[str]

    # --- Current Turn ---
    last_user_input: str

    # --- Dialogue (append-only) ---
    messages: Annotated[list[ChatMessage], operator.add]

    # --- Routing ---
    next_action: NextAction


def create_initial_state() -> LearningGraphState:
    return {
        "learning_items": {},
        "active_item_id": None,
        "last_user_input": "",
        "messages": [],
        "next_action": "guide",
    }


def resolve_active_item(state: LearningGraphState) -> Optional[LearningItem]:
    """The active item, or None when there is none or its id does not resolve."""
    active_id = state.get("active_item_id")
    if not active_id:
        return None
    return (state.get("learning_items") or {}).get(active_id)


def serialize_state(state: LearningGraphState) -> dict[str, Any]:
    """Convert a graph state into a JSON-safe dict."""
    items = state.get("learning_items") or {}
    return {
        "learning_items": {
            item_id: item.model_dump(mode="json") for item_id, item in items.items()
        },
        "active_item_id": state.get("active_item_id"),
        "last_user_input": state.get("last_user_input", ""),
        "messages": [
            {"role": m["role"], "content": m["content"]} for m in state.get("messages") or []
        ],
        "next_action": state.get("next_action", "guide"),
    }


def deserialize_state(data: dict[str, Any]) -> LearningGraphState:
    """
    Rebuild a graph state from ``serialize_state`` output.

    Raises:
        LearningStateError: The data does not describe a valid state
    """
    if not isinstance(data, dict):
        raise LearningStateError("Serialized state must be a mapping")

    try:
        items = {
            item_id: LearningItem.model_validate(raw)
            for item_id, raw in (data.get("learning_items") or {}).items()
        }
    except ValidationError as e:
        raise LearningStateError(f"Invalid learning item: {e}") from e

    for item_id, item in items.items():
        if item.id != item_id:
            raise LearningStateError(f"Learning item keyed as {item_id!r} has id {item.id!r}")

    active_id = data.get("active_item_id")
    if active_id is not None and active_id not in items:
        raise LearningStateError(f"Active item {active_id!r} is not in learning_items")

    next_action = data.get("next_action", "guide")
    if next_action not in NEXT_ACTIONS:
        raise LearningStateError(f"Invalid next_action: {next_action!r}")

    messages: list[ChatMessage] = []
    for message in data.get("messages") or []:
        if not isinstance(message, dict) or message.get("role") not in ("user", "assistant"):
            raise LearningStateError(f"Invalid message: {message!r}")
        messages.append({"role": message["role"], "content": str(message.get("content", ""))})

    return {
        "learning_items": items,
        "active_item_id": active_id,
        "last_user_input": data.get("last_user_input", ""),
        "messages": messages,
        "next_action": next_action,
    }


__all__ = [
    "ChatMessage",
    "LearningGraphState",
    "NextAction",
    "create_initial_state",
    "deserialize_state",
    "merge_learning_items",
    "resolve_active_item",
    "serialize_state",
]
