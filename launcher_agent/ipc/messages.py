"""Messages exchanged over the local socket (newline-delimited JSON)."""

import json
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from ..exceptions import IPCError

_FLAGS = ("apps", "homebrew", "clipboard", "commands", "nixpkgs")


@dataclass
class ReloadMessage:
    """Which caches/files to reload into the primary, plus an optional prompt override."""
    apps: bool = False
    homebrew: bool = False
    clipboard: bool = False
    commands: bool = False
    nixpkgs: bool = False
    sources: List[str] = field(default_factory=list)
    prompt: Optional[str] = None

    def to_json(self) -> str:
        """Serialize as a single line (no trailing newline)."""
        return json.dumps({"Reload": asdict(self)}, ensure_ascii=False)

    @classmethod
    def from_json(cls, line: str) -> "ReloadMessage":
        """
        Parse one line received on the socket.

        Raises:
            IPCError: If the line is not a well-formed Reload message
        """
        try:
            data = json.loads(line)
        except (json.JSONDecodeError, RecursionError) as e:
            raise IPCError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("Reload"), dict):
            raise IPCError(f"Unknown message: {line.strip()[:200]}")
        body = data["Reload"]

        kwargs = {}
        for flag in _FLAGS:
            value = body.get(flag, False)
            if not isinstance(value, bool):
                raise IPCError(f"Field '{flag}' must be a boolean")
            kwargs[flag] = value

        sources = body.get("sources", [])
        if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
            raise IPCError("Field 'sources' must be a list of strings")

        prompt = body.get("prompt")
        if prompt is not None and not isinstance(prompt, str):
            raise IPCError("Field 'prompt' must be a string or null")

        return cls(sources=list(sources), prompt=prompt, **kwargs)
