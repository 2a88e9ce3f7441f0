"""Local stream socket carrying newline-delimited reload messages."""

import os
import socket
import threading
from queue import Empty, Queue
from typing import List, Optional

from ..exceptions import IPCError
from ..utils.log import get_logger
from .messages import ReloadMessage

logger = get_logger("launcher")

_MAX_LINE = 64 * 1024


def _remove_socket(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Warning: Failed to remove socket file {path}: {e}")


class IPCListener:
    """Accepts connections on a unix socket and queues the messages received.

    A background thread owns the accept loop. Each connection is read to
    EOF; every complete line is parsed and malformed lines are logged and
    skipped. The UI thread collects messages with ``drain``.
    """

    def __init__(self, socket_path: str):
        self.socket_path = socket_path
        self._queue: "Queue[ReloadMessage]" = Queue()
        self._socket: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False

    def start(self) -> None:
        """
        Bind the socket and start accepting.

        Raises:
            IPCError: If the socket cannot be bound
        """
        if self._running:
            return

        # A socket file left by a crashed primary blocks bind()
        _remove_socket(self.socket_path)

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(self.socket_path)
        except OSError as e:
            sock.close()
            raise IPCError(f"Failed to bind socket at {self.socket_path}: {e}") from e
        sock.listen(5)
        sock.settimeout(0.5)

        self._socket = sock
        self._running = True
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()
        logger.info(f"Listening on {self.socket_path}")

    def stop(self) -> None:
        """Stop accepting and remove the socket file."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
        self._thread = None

        if self._socket:
            self._socket.close()
            self._socket = None
        _remove_socket(self.socket_path)

    def _accept_loop(self) -> None:
        while self._running:
            try:
                conn, _ = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept failed: {e}")
                break

            try:
                with conn:
                    self._handle_connection(conn)
            except Exception as e:
                # One bad client must not stop the listener
                logger.error(f"Dropped connection: {type(e).__name__}: {e}")

    def _handle_connection(self, conn: socket.socket) -> None:
        conn.settimeout(2.0)
        buffer = b""
        try:
            while len(buffer) <= _MAX_LINE:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                buffer += chunk
                while b"\n" in buffer:
                    line, buffer = buffer.split(b"\n", 1)
                    self._handle_line(line)
        except OSError as e:
            logger.warning(f"Warning: Connection error: {e}")
            return

        if buffer.strip():
            self._handle_line(buffer)

    def _handle_line(self, raw: bytes) -> None:
        line = raw.decode("utf-8", errors="replace").strip()
        if not line:
            return
        try:
            message = ReloadMessage.from_json(line)
        except IPCError as e:
            logger.warning(f"Warning: Ignoring malformed message: {e}")
            return
        logger.info("Received reload request")
        self._queue.put(message)

    def drain(self, max_items: int = 100) -> List[ReloadMessage]:
        """All queued messages, oldest first, without blocking."""
        collected: List[ReloadMessage] = []
        for _ in range(max_items):
            try:
                collected.append(self._queue.get_nowait())
            except Empty:
                break
        return collected


def send_message(socket_path: str, message: ReloadMessage, timeout: float = 2.0) -> None:
    """
    Deliver one message to a running primary.

    Raises:
        IPCError: If the primary cannot be reached
    """
    client = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    client.settimeout(timeout)
    try:
        client.connect(socket_path)
        client.sendall(message.to_json().encode("utf-8") + b"\n")
    except OSError as e:
        raise IPCError(f"Failed to send to {socket_path}: {e}") from e
    finally:
        client.close()
