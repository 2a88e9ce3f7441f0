"""Command-line arguments, shared by the entry point and self-reload commands."""

import argparse
import os
import shlex
from typing import List, Optional

from .ipc.messages import ReloadMessage

PROG = "launcher-agent"
DAEMON_NAMES = ["apps", "homebrew", "clipboard", "nixpkgs"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Keyboard-driven launcher over cached application, package and clipboard sources.",
    )
    parser.add_argument("--apps", action="store_true", help="Include installed applications")
    parser.add_argument("--homebrew", action="store_true", help="Include Homebrew formulae and casks")
    parser.add_argument("--clipboard", action="store_true", help="Include clipboard history")
    parser.add_argument("--commands", action="store_true", help="Include custom commands and mode switches")
    parser.add_argument("--nixpkgs", action="store_true", help="Include the nixpkgs package index")
    parser.add_argument("-s", "--source", dest="sources", action="append", default=[], metavar="PATH",
                        help="Additional cache file to load (repeatable)")
    parser.add_argument("-p", "--prompt", default=None, help="Prompt text shown before the query")

    subparsers = parser.add_subparsers(dest="command")
    daemon = subparsers.add_parser("daemon", help="Run a cache daemon")
    daemon.add_argument("name", choices=DAEMON_NAMES)
    return parser


def request_from_args(args: argparse.Namespace) -> ReloadMessage:
    return ReloadMessage(
        apps=args.apps,
        homebrew=args.homebrew,
        clipboard=args.clipboard,
        commands=args.commands,
        nixpkgs=args.nixpkgs,
        sources=[os.path.expanduser(s) for s in args.sources],
        prompt=args.prompt,
    )


def parse_reload_action(action: str) -> Optional[ReloadMessage]:
    """
    Recognize a command line that re-invokes the launcher itself.

    Args:
        action: Shell command line of a custom command

    Returns:
        The reload it requests, or None if it is not a launcher invocation
    """
    try:
        tokens: List[str] = shlex.split(action)
    except ValueError:
        return None
    if not tokens or os.path.basename(tokens[0]) != PROG:
        return None

    try:
        args = build_parser().parse_args(tokens[1:])
    except SystemExit:
        return None
    if args.command is not None:
        return None
    return request_from_args(args)
