"""Shared HTTP client construction for registry calls."""

import ssl

import certifi
import httpx

from .. import __version__

USER_AGENT = f"launcher-agent/{__version__}"


def build_client(timeout: float) -> httpx.Client:
    """
    Build a blocking HTTP client.

    Certificates come from certifi: Python builds on macOS often ship without
    a usable system CA bundle.

    Args:
        timeout: Connect/read/write/pool timeout in seconds
    """
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": USER_AGENT},
        verify=ssl.create_default_context(cafile=certifi.where()),
        follow_redirects=True,
    )
