"""Single-instance coordination and the reload message channel."""

from .channel import IPCListener, send_message
from .coordinator import InstanceCoordinator, pid_alive
from .messages import ReloadMessage

__all__ = [
    'IPCListener',
    'send_message',
    'InstanceCoordinator',
    'pid_alive',
    'ReloadMessage',
]
