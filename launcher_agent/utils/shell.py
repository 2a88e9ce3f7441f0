"""Process launching utilities."""

import subprocess
from typing import List

from ..exceptions import ExecutionError


class ShellExecutor:
    """Centralized detached process launching with standardized error handling."""

    def spawn(self, args: List[str]) -> subprocess.Popen:
        """
        Start a process without waiting for it.

        Args:
            args: Program and arguments

        Returns:
            The running process

        Raises:
            ExecutionError: If the program cannot be started
        """
        try:
            return subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise ExecutionError(f"Failed to launch {args[0]!r}: {e}") from e

    def open_path(self, target: str, application: bool = False) -> subprocess.Popen:
        """Open a URL or file with ``open``; ``application`` passes ``-a``."""
        args = ["open", "-a", target] if application else ["open", target]
        return self.spawn(args)

    def run_shell(self, command: str) -> subprocess.Popen:
        """Run a shell command line through ``sh -c``."""
        return self.spawn(["sh", "-c", command])
