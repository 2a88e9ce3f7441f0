"""Single-instance coordination through a PID lock file and the IPC socket."""

import os
from typing import Callable, List, Optional

from ..exceptions import IPCError
from ..utils.log import get_logger
from .channel import IPCListener, send_message
from .messages import ReloadMessage

logger = get_logger("launcher")


def pid_alive(pid: int) -> bool:
    """Signal-0 probe; a process owned by someone else still counts as alive."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except OSError:
        return False
    return True


class InstanceCoordinator:
    """Makes a launch either forward its request to the primary or become it.

    The lock file holds the primary's PID as decimal text. A secondary
    launch that finds a live PID sends exactly one ``ReloadMessage`` over
    the socket and exits. Otherwise the lock is stale (or absent), and the
    launch takes over: it rewrites the lock with its own PID and listens.
    """

    def __init__(
        self,
        lock_path: str,
        socket_path: str,
        is_alive: Callable[[int], bool] = pid_alive,
        sender: Callable[[str, ReloadMessage], None] = send_message,
    ):
        self.lock_path = lock_path
        self.socket_path = socket_path
        self.is_alive = is_alive
        self.sender = sender
        self.listener: Optional[IPCListener] = None

    def read_lock(self) -> Optional[int]:
        try:
            with open(self.lock_path, "r") as f:
                return int(f.read().strip())
        except (OSError, ValueError):
            return None

    def _remove_lock(self) -> None:
        try:
            os.unlink(self.lock_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Warning: Failed to remove lock file: {e}")

    def check_single_instance(self, request: ReloadMessage) -> bool:
        """
        Forward the request if a primary is already running.

        Args:
            request: Reload request built from this launch's arguments

        Returns:
            True if a live primary received the request and this process
            should exit; False if this process should become the primary
        """
        pid = self.read_lock()
        if pid is not None and pid != os.getpid() and self.is_alive(pid):
            try:
                self.sender(self.socket_path, request)
                logger.info(f"Sent reload request to running instance (pid {pid})")
                return True
            except IPCError as e:
                logger.warning(f"Warning: Running instance unreachable: {e}")

        if os.path.exists(self.lock_path):
            logger.info("Removing stale lock file")
            self._remove_lock()
        return False

    def become_primary(self) -> None:
        """
        Write our PID to the lock file and start listening.

        Raises:
            IPCError: If the socket cannot be bound
            OSError: If the lock file cannot be written
        """
        lock_dir = os.path.dirname(self.lock_path)
        if lock_dir:
            os.makedirs(lock_dir, exist_ok=True)
        with open(self.lock_path, "w") as f:
            f.write(str(os.getpid()))

        self.listener = IPCListener(self.socket_path)
        self.listener.start()

    def messages(self) -> List[ReloadMessage]:
        """Reload requests received since the last call (never blocks)."""
        if self.listener is None:
            return []
        return self.listener.drain()

    def cleanup(self) -> None:
        """Remove the lock file and socket on a normal exit."""
        if self.listener is not None:
            self.listener.stop()
            self.listener = None
        if self.read_lock() == os.getpid():
            self._remove_lock()
