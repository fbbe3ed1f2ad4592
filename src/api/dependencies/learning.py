from __future__ import annotations

from fastapi import HTTPException, status
from langchain_core.runnables import RunnableConfig

from src.services.config import get_system_language
from src.services.storage import SessionStore
from src.services.storage import get_session_store as _get_session_store


def get_session_store() -> SessionStore:
    try:
        return _get_session_store()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Session storage unavailable",
        ) from exc


def get_graph_config() -> RunnableConfig:
    """Graph config for a request; tests override this to inject fake agents."""
    return {"configurable": {"language": get_system_language()}}
