"""Configuration for the launcher agent."""

import os
import tempfile
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _optional_path(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return os.path.expanduser(value) if value else None


class Config:
    """Configuration class for the launcher agent."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        # Cache directory override (otherwise XDG_CACHE_HOME or ~/.cache is used)
        self.cache_dir = _optional_path("LAUNCHER_AGENT_CACHE_DIR")

        # Per-source cache TTLs in seconds (clipboard history never expires)
        self.apps_ttl = float(os.getenv("LAUNCHER_AGENT_APPS_TTL", "86400"))
        self.homebrew_ttl = float(os.getenv("LAUNCHER_AGENT_HOMEBREW_TTL", "86400"))
        self.nixpkgs_ttl = float(os.getenv("LAUNCHER_AGENT_NIXPKGS_TTL", "86400"))

        # Clipboard daemon
        self.clipboard_max_history = int(os.getenv("LAUNCHER_AGENT_CLIPBOARD_MAX_HISTORY", "1000"))
        self.clipboard_poll_interval = float(os.getenv("LAUNCHER_AGENT_CLIPBOARD_POLL_INTERVAL", "0.5"))

        # Applications daemon: quiet period after the last filesystem event
        self.apps_debounce = float(os.getenv("LAUNCHER_AGENT_APPS_DEBOUNCE", "2.0"))

        # Remote search modes: keystroke debounce and the redraw tick that checks it
        self.search_debounce = float(os.getenv("LAUNCHER_AGENT_SEARCH_DEBOUNCE", "0.3"))
        self.tick_interval = float(os.getenv("LAUNCHER_AGENT_TICK_INTERVAL", "0.05"))

        # HTTP timeouts: interactive searches must stay short, daemon fetches can take a while
        self.search_timeout = float(os.getenv("LAUNCHER_AGENT_SEARCH_TIMEOUT", "5.0"))
        self.fetch_timeout = float(os.getenv("LAUNCHER_AGENT_FETCH_TIMEOUT", "30.0"))

        # Single-instance coordination
        runtime_dir = tempfile.gettempdir()
        self.lock_file = _optional_path("LAUNCHER_AGENT_LOCK_FILE") or os.path.join(runtime_dir, "launcher-agent.lock")
        self.socket_path = _optional_path("LAUNCHER_AGENT_SOCKET_PATH") or os.path.join(runtime_dir, "launcher-agent.sock")

        # Custom commands file (TOML)
        self.commands_file = _optional_path("LAUNCHER_AGENT_COMMANDS_FILE") or os.path.expanduser(
            "~/.config/launcher-agent/commands.toml"
        )

        self.prompt = os.getenv("LAUNCHER_AGENT_PROMPT", "Run: ")
        self.log_level = os.getenv("LAUNCHER_AGENT_LOG_LEVEL", "INFO").upper()

        # Validate configuration
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        for name in ("apps_ttl", "homebrew_ttl", "nixpkgs_ttl"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        if self.clipboard_max_history < 1:
            raise ValueError(f"Clipboard history size must be at least 1, got {self.clipboard_max_history}")

        for name in ("clipboard_poll_interval", "apps_debounce", "search_debounce",
                     "tick_interval", "search_timeout", "fetch_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level not in valid_levels:
            raise ValueError(
                f"Invalid log level '{self.log_level}'. "
                f"Must be one of: {', '.join(valid_levels)}"
            )


# Create a global config instance
_config = Config()

# Expose configuration values as module-level variables
CACHE_DIR = _config.cache_dir
APPS_TTL = _config.apps_ttl
HOMEBREW_TTL = _config.homebrew_ttl
NIXPKGS_TTL = _config.nixpkgs_ttl
CLIPBOARD_MAX_HISTORY = _config.clipboard_max_history
CLIPBOARD_POLL_INTERVAL = _config.clipboard_poll_interval
APPS_DEBOUNCE = _config.apps_debounce
SEARCH_DEBOUNCE = _config.search_debounce
TICK_INTERVAL = _config.tick_interval
SEARCH_TIMEOUT = _config.search_timeout
FETCH_TIMEOUT = _config.fetch_timeout
LOCK_FILE = _config.lock_file
SOCKET_PATH = _config.socket_path
COMMANDS_FILE = _config.commands_file
PROMPT = _config.prompt
LOG_LEVEL = _config.log_level

__all__ = [
    "Config",
    "CACHE_DIR",
    "APPS_TTL",
    "HOMEBREW_TTL",
    "NIXPKGS_TTL",
    "CLIPBOARD_MAX_HISTORY",
    "CLIPBOARD_POLL_INTERVAL",
    "APPS_DEBOUNCE",
    "SEARCH_DEBOUNCE",
    "TICK_INTERVAL",
    "SEARCH_TIMEOUT",
    "FETCH_TIMEOUT",
    "LOCK_FILE",
    "SOCKET_PATH",
    "COMMANDS_FILE",
    "PROMPT",
    "LOG_LEVEL",
]
