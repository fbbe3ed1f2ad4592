"""
SQLite persistence for learning dialogue sessions.

Each row holds one session's graph state as ``serialize_state`` JSON, so a
session can be resumed by a later process (CLI run or API request).
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import os
from pathlib import Path
import sqlite3
import threading
import time
from typing import Any
import uuid

from src.agents.learning.errors import LearningStateError
from src.agents.learning.graph.state import LearningGraphState, deserialize_state, serialize_state
from src.services.config import PROJECT_ROOT, load_config_with_main

DEFAULT_SQLITE_PATH = "./data/db/learning_sessions.sqlite"


@dataclass(frozen=True)
class StorageSettings:
    sqlite_path: Path


def get_storage_settings(project_root: Path | None = None) -> StorageSettings:
    """
    Get storage settings for learning sessions.

    Priority:
    1) ``LEARNING_SQLITE_PATH`` environment variable
    2) config/main.yaml ("storage" section)
    3) Built-in default
    """
    if project_root is None:
        project_root = PROJECT_ROOT

    cfg = load_config_with_main(project_root=project_root)
    storage_cfg = cfg.get("storage", {}) if isinstance(cfg, dict) else {}
    default_sqlite_path = str(storage_cfg.get("sqlite_path", DEFAULT_SQLITE_PATH))

    sqlite_path = Path(os.getenv("LEARNING_SQLITE_PATH") or default_sqlite_path)
    if not sqlite_path.is_absolute():
        sqlite_path = (project_root / sqlite_path).resolve()

    return StorageSettings(sqlite_path=sqlite_path)


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._lock = threading.RLock()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

        self._apply_pragmas()
        self._init_schema()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _apply_pragmas(self) -> None:
        with self._lock:
            try:
                self._conn.execute("PRAGMA journal_mode=WAL;")
                self._conn.execute("PRAGMA synchronous=NORMAL;")
            except sqlite3.DatabaseError:
                # Non-fatal (e.g., some networked filesystems)
                pass

    def _init_schema(self) -> None:
        schema = """
        CREATE TABLE IF NOT EXISTS learning_sessions (
            id TEXT PRIMARY KEY,
            state TEXT NOT NULL,
            created_at REAL NOT NULL,
            updated_at REAL NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_learning_sessions_updated
            ON learning_sessions(updated_at);
        """
        with self._lock:
            self._conn.executescript(schema)
            self._conn.commit()

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def save(self, session_id: str, state: LearningGraphState) -> None:
        payload = json.dumps(serialize_state(state), ensure_ascii=False)
        now = time.time()
        with self._lock:
            self._conn.execute(
                "INSERT INTO learning_sessions(id, state, created_at, updated_at) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET state=excluded.state, updated_at=excluded.updated_at",
                (session_id, payload, now, now),
            )
            self._conn.commit()

    def load(self, session_id: str) -> LearningGraphState | None:
        """
        Load a session's state, or None if it does not exist.

        Raises:
            LearningStateError: The stored state is corrupt
        """
        with self._lock:
            row = self._conn.execute(
                "SELECT state FROM learning_sessions WHERE id = ?",
                (session_id,),
            ).fetchone()
        if not row:
            return None

        try:
            data = json.loads(row["state"])
        except json.JSONDecodeError as e:
            raise LearningStateError(f"Stored session {session_id!r} is not valid JSON") from e
        return deserialize_state(data)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            cur = self._conn.execute("DELETE FROM learning_sessions WHERE id = ?", (session_id,))
            self._conn.commit()
            return cur.rowcount > 0

    def list_sessions(self, *, limit: int = 20) -> list[dict[str, Any]]:
        """Most recently updated sessions first, without their state."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, created_at, updated_at FROM learning_sessions "
                "ORDER BY updated_at DESC LIMIT ?",
                (int(limit),),
            ).fetchall()
        return [
            {
                "session_id": r["id"],
                "created_at": r["created_at"],
                "updated_at": r["updated_at"],
            }
            for r in rows
        ]


_session_store_lock = threading.Lock()
_session_store_instance: SessionStore | None = None


def get_session_store(project_root: Path | None = None) -> SessionStore:
    """Process-wide store at the configured SQLite path."""
    settings = get_storage_settings(project_root=project_root)

    global _session_store_instance
    with _session_store_lock:
        if _session_store_instance is None or _session_store_instance.db_path != settings.sqlite_path:
            if _session_store_instance is not None:
                _session_store_instance.close()
            _session_store_instance = SessionStore(settings.sqlite_path)
        return _session_store_instance


__all__ = [
    "SessionStore",
    "StorageSettings",
    "get_session_store",
    "get_storage_settings",
    "new_session_id",
]
