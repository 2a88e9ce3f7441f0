"""Entry point: run a daemon, or forward/become the single launcher instance."""

import signal
import sys
from typing import List, Optional

from .cli import build_parser, request_from_args
from .exceptions import IPCError, LauncherError
from .utils.log import get_logger, setup_logging

logger = get_logger("launcher")


def _exit_on_sigterm(signum, frame):
    # Unwind through the finally blocks so the lock and socket are removed
    raise SystemExit(0)


def run_launcher(args) -> int:
    from .config import LOCK_FILE, SOCKET_PATH
    from .console import ConsoleFrontend
    from .ipc.coordinator import InstanceCoordinator
    from .session import LauncherSession

    request = request_from_args(args)
    coordinator = InstanceCoordinator(LOCK_FILE, SOCKET_PATH)

    if coordinator.check_single_instance(request):
        return 0

    try:
        coordinator.become_primary()
    except (IPCError, OSError) as e:
        logger.error(f"Could not become the running instance: {e}")
        coordinator.cleanup()
        return 1

    signal.signal(signal.SIGTERM, _exit_on_sigterm)
    try:
        session = LauncherSession(request, coordinator=coordinator)
        return ConsoleFrontend(session).run()
    except KeyboardInterrupt:
        return 0
    finally:
        coordinator.cleanup()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.command == "daemon":
        from .daemons import run_daemon
        try:
            return run_daemon(args.name)
        except LauncherError as e:
            logger.error(f"Error: {e}")
            return 1

    return run_launcher(args)


if __name__ == "__main__":
    sys.exit(main())
