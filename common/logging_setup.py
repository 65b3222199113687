"""Logging for the expense tracker.

All modules log under the ``expense_tracker`` root: ``get_logger("store")``
gives ``expense_tracker.store``. The root stays silent until an entrypoint
(CLI, API factory, desktop window) calls ``configure_logging``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

ROOT_LOGGER = "expense_tracker"
LEVEL_ENV = "EXPENSE_TRACKER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

Level = Union[int, str, None]


class _ConsoleHandler(logging.StreamHandler):
    """Marks the handler ``configure_logging`` owns on the root logger."""


def resolve_level(level: Level = None) -> int:
    """Turn a level name or number into an int.

    Unset or unknown values fall through to ``EXPENSE_TRACKER_LOG_LEVEL`` and
    then to INFO.
    """
    for candidate in (level, os.getenv(LEVEL_ENV)):
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.strip():
            text = candidate.strip().upper()
            if text.isdigit():
                return int(text)
            resolved = logging.getLevelName(text)
            if isinstance(resolved, int):
                return resolved
    return logging.INFO


def configure_logging(level: Level = None, *, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Send the package's records to ``stream`` (stderr by default).

    Calling it again only adjusts the level; the root never gets a second
    console handler.
    """
    root = logging.getLogger(ROOT_LOGGER)
    resolved = resolve_level(level)

    console = next((h for h in root.handlers if isinstance(h, _ConsoleHandler)), None)
    if console is None:
        for handler in [h for h in root.handlers if isinstance(h, logging.NullHandler)]:
            root.removeHandler(handler)
        console = _ConsoleHandler(stream if stream is not None else sys.stderr)
        console.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(console)
        root.propagate = False
    elif stream is not None:
        console.setStream(stream)

    root.setLevel(resolved)
    console.setLevel(resolved)
    return root


def get_logger(module: str) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return root.getChild(module)
