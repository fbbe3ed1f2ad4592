"""
Storage services.

This package provides SQLite-backed persistence for learning dialogue sessions.
"""

from .session_store import (
    SessionStore,
    StorageSettings,
    get_session_store,
    get_storage_settings,
    new_session_id,
)

__all__ = [
    "SessionStore",
    "StorageSettings",
    "get_session_store",
    "get_storage_settings",
    "new_session_id",
]
