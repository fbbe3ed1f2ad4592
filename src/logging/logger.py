# -*- coding: utf-8 -*-
"""
Logger factory.

All loggers live under the ``LearningTutor`` namespace. The console handler is
attached once to the namespace root; file handlers are attached per log
directory so several components can share one file.

``configure_logging()`` applies the ``logging`` section of
``config/main.yaml``:

    logging:
      level: INFO          # level of the namespace root
      log_dir: ./data/logs # relative to the project root; omit to disable
"""

from __future__ import annotations

import logging
from pathlib import Path
import sys

from src.services.config import PROJECT_ROOT, load_config_with_main

ROOT_LOGGER_NAME = "LearningTutor"
LOG_FILE_NAME = "learning_tutor.log"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_console_handler: logging.Handler | None = None
_file_handlers: dict[str, logging.Handler] = {}


def _root() -> logging.Logger:
    global _console_handler
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stderr)
        _console_handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        root.addHandler(_console_handler)
        root.setLevel(logging.INFO)
        root.propagate = False
    return root


def _level(level: str | int) -> str | int:
    return level if isinstance(level, int) else level.upper()


def _attach_file_handler(root: logging.Logger, log_dir: str | Path) -> Path:
    path = Path(log_dir).expanduser().resolve()
    key = str(path)
    if key not in _file_handlers:
        path.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path / LOG_FILE_NAME, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
        _file_handlers[key] = handler
    return path


def get_logger(
    name: str,
    level: str | int | None = None,
    log_dir: str | Path | None = None,
) -> logging.Logger:
    """
    Get a namespaced logger.

    Args:
        name: Component name (e.g. "LearningGraph", "Learning.guide_agent")
        level: Level for this logger; by default it follows the configured
            root level
        log_dir: Optional directory; when given, records also go to
            ``<log_dir>/learning_tutor.log``

    Returns:
        Configured ``logging.Logger``
    """
    root = _root()
    if log_dir:
        _attach_file_handler(root, log_dir)

    logger = root.getChild(name)
    if level is not None:
        logger.setLevel(_level(level))
    return logger


def configure_logging(project_root: Path | None = None) -> Path | None:
    """
    Apply ``logging.level`` and ``logging.log_dir`` from the configuration.

    Returns:
        The resolved log directory, or None when file logging is off
    """
    root_dir = project_root or PROJECT_ROOT
    settings = load_config_with_main(project_root=root_dir).get("logging") or {}

    root = _root()
    root.setLevel(_level(settings.get("level") or "INFO"))

    log_dir = settings.get("log_dir")
    if not log_dir:
        return None
    path = Path(log_dir).expanduser()
    if not path.is_absolute():
        path = root_dir / path
    return _attach_file_handler(root, path)


def set_console_level(level: str | int) -> None:
    """Change the console verbosity without touching file handlers."""
    _root()
    assert _console_handler is not None
    _console_handler.setLevel(_level(level))


__all__ = [
    "LOG_FILE_NAME",
    "ROOT_LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "set_console_level",
]
