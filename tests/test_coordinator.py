# Tests for single-instance coordination and the reload socket

import os
import shutil
import socket
import tempfile
import time
from unittest.mock import MagicMock, patch

import pytest

from launcher_agent.exceptions import IPCError
from launcher_agent.ipc import InstanceCoordinator, IPCListener, ReloadMessage, pid_alive, send_message


@pytest.fixture
def runtime_dir():
    # AF_UNIX paths are length-limited, so keep them short
    path = tempfile.mkdtemp(prefix="la-", dir="/tmp")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def paths(runtime_dir):
    return os.path.join(runtime_dir, "la.lock"), os.path.join(runtime_dir, "la.sock")


def wait_for_messages(listener, count=1, timeout=2.0):
    collected = []
    deadline = time.monotonic() + timeout
    while len(collected) < count and time.monotonic() < deadline:
        collected.extend(listener.drain())
        time.sleep(0.01)
    return collected


def test_live_primary_receives_exactly_one_message(paths):
    lock_path, socket_path = paths
    with open(lock_path, "w") as f:
        f.write(str(os.getpid() + 1))

    sender = MagicMock()
    coordinator = InstanceCoordinator(lock_path, socket_path, is_alive=lambda pid: True, sender=sender)
    request = ReloadMessage(apps=True, prompt="Go: ")

    assert coordinator.check_single_instance(request) is True
    sender.assert_called_once_with(socket_path, request)
    assert coordinator.listener is None
    assert os.path.exists(lock_path)


def test_dead_pid_is_treated_as_stale(paths):
    lock_path, socket_path = paths
    with open(lock_path, "w") as f:
        f.write("999999")

    sender = MagicMock()
    coordinator = InstanceCoordinator(lock_path, socket_path, is_alive=lambda pid: False, sender=sender)

    assert coordinator.check_single_instance(ReloadMessage(apps=True)) is False
    sender.assert_not_called()
    assert not os.path.exists(lock_path)


def test_garbage_lock_file_is_treated_as_stale(paths):
    lock_path, socket_path = paths
    with open(lock_path, "w") as f:
        f.write("not a pid")

    coordinator = InstanceCoordinator(lock_path, socket_path, is_alive=lambda pid: True, sender=MagicMock())
    assert coordinator.check_single_instance(ReloadMessage()) is False
    assert not os.path.exists(lock_path)


def test_unreachable_primary_falls_back_to_taking_over(paths):
    lock_path, socket_path = paths
    with open(lock_path, "w") as f:
        f.write(str(os.getpid() + 1))

    sender = MagicMock(side_effect=IPCError("connection refused"))
    coordinator = InstanceCoordinator(lock_path, socket_path, is_alive=lambda pid: True, sender=sender)

    assert coordinator.check_single_instance(ReloadMessage()) is False
    assert not os.path.exists(lock_path)


def test_become_primary_then_cleanup(paths):
    lock_path, socket_path = paths
    coordinator = InstanceCoordinator(lock_path, socket_path)

    assert coordinator.check_single_instance(ReloadMessage()) is False
    coordinator.become_primary()
    try:
        with open(lock_path) as f:
            assert f.read() == str(os.getpid())
        assert os.path.exists(socket_path)
    finally:
        coordinator.cleanup()

    assert not os.path.exists(lock_path)
    assert not os.path.exists(socket_path)


def test_secondary_launch_reaches_primary_over_socket(paths):
    lock_path, socket_path = paths
    primary = InstanceCoordinator(lock_path, socket_path)
    primary.become_primary()
    try:
        # Our own PID is in the lock file, so pretend it belongs to another process
        secondary = InstanceCoordinator(lock_path, socket_path, is_alive=lambda pid: True)
        with patch("launcher_agent.ipc.coordinator.os.getpid", return_value=-1):
            request = ReloadMessage(clipboard=True, sources=["/tmp/x.bin"], prompt="Clip: ")
            assert secondary.check_single_instance(request) is True

        assert wait_for_messages(primary.listener) == [request]
    finally:
        primary.cleanup()


def test_listener_skips_malformed_lines(runtime_dir):
    socket_path = os.path.join(runtime_dir, "l.sock")
    listener = IPCListener(socket_path)
    listener.start()
    try:
        client = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        client.connect(socket_path)
        client.sendall(b"garbage\n" + ReloadMessage(apps=True).to_json().encode() + b"\n")
        client.close()

        assert wait_for_messages(listener) == [ReloadMessage(apps=True)]
    finally:
        listener.stop()


def test_listener_survives_deeply_nested_json(runtime_dir):
    socket_path = os.path.join(runtime_dir, "n.sock")
    listener = IPCListener(socket_path)
    listener.start()
    try:
        client = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        client.connect(socket_path)
        client.sendall(b"[" * 60000 + b"\n")
        client.close()

        send_message(socket_path, ReloadMessage(apps=True))
        assert wait_for_messages(listener) == [ReloadMessage(apps=True)]
    finally:
        listener.stop()


def test_listener_replaces_stale_socket_file(runtime_dir):
    socket_path = os.path.join(runtime_dir, "s.sock")
    with open(socket_path, "w") as f:
        f.write("left over")

    listener = IPCListener(socket_path)
    listener.start()
    try:
        send_message(socket_path, ReloadMessage(nixpkgs=True))
        assert wait_for_messages(listener) == [ReloadMessage(nixpkgs=True)]
    finally:
        listener.stop()


def test_send_without_listener_raises(runtime_dir):
    with pytest.raises(IPCError):
        send_message(os.path.join(runtime_dir, "nobody.sock"), ReloadMessage())


def test_pid_alive_probe():
    assert pid_alive(os.getpid()) is True
    assert pid_alive(0) is False
    with patch("launcher_agent.ipc.coordinator.os.kill", side_effect=ProcessLookupError):
        assert pid_alive(12345) is False
    with patch("launcher_agent.ipc.coordinator.os.kill", side_effect=PermissionError):
        assert pid_alive(12345) is True
