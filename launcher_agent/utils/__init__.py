"""Utility modules for the launcher agent."""

from .log import get_logger, setup_logging
from .pasteboard import Pasteboard
from .shell import ShellExecutor

__all__ = ["get_logger", "setup_logging", "Pasteboard", "ShellExecutor"]
