"""Source daemons that keep the caches fresh."""

from typing import Dict, Type

from .apps import ApplicationsDaemon
from .base import ContinuousDaemon, OneShotDaemon, SourceDaemon
from .clipboard import ClipboardDaemon, ClipboardHistory
from .homebrew import HomebrewDaemon
from .nixpkgs import NixpkgsDaemon

DAEMONS: Dict[str, Type[SourceDaemon]] = {
    ApplicationsDaemon.name: ApplicationsDaemon,
    HomebrewDaemon.name: HomebrewDaemon,
    ClipboardDaemon.name: ClipboardDaemon,
    NixpkgsDaemon.name: NixpkgsDaemon,
}


def run_daemon(name: str) -> int:
    """
    Run a daemon by name.

    Returns:
        Process exit status

    Raises:
        KeyError: If no daemon has that name
    """
    return DAEMONS[name]().run()


__all__ = [
    'SourceDaemon',
    'OneShotDaemon',
    'ContinuousDaemon',
    'ApplicationsDaemon',
    'ClipboardDaemon',
    'ClipboardHistory',
    'HomebrewDaemon',
    'NixpkgsDaemon',
    'DAEMONS',
    'run_daemon',
]
