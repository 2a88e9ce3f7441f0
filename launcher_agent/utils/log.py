"""Source-tagged logging to standard error."""

import logging
import sys
from typing import Optional

_FORMAT = "[%(name)s] %(message)s"
_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once per process.

    Every record is written to standard error as ``[<tag>] <message>`` where
    the tag is the logger name (e.g. ``apps daemon``).

    Args:
        level: Logging level name (defaults to LAUNCHER_AGENT_LOG_LEVEL)
    """
    global _configured
    if _configured:
        return

    if level is None:
        from ..config import LOG_LEVEL
        level = LOG_LEVEL

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    _configured = True


def get_logger(tag: str) -> logging.Logger:
    """Return the logger for a source tag such as ``clipboard daemon``."""
    return logging.getLogger(tag)
