"""Custom exception classes for the launcher agent."""


class LauncherError(Exception):
    """Base exception for launcher agent errors."""
    pass


class CacheError(LauncherError):
    """Exception raised when a cache payload cannot be encoded or decoded."""
    pass


class FetchError(LauncherError):
    """Exception raised when a source daemon cannot fetch its data."""
    pass


class RemoteSearchError(LauncherError):
    """Exception raised when an interactive registry search fails."""
    pass


class IPCError(LauncherError):
    """Exception raised for local socket send or parse failures."""
    pass


class CommandsConfigError(LauncherError):
    """Exception raised when the custom commands file is malformed."""
    pass


class ExecutionError(LauncherError):
    """Exception raised when a selected item cannot be launched or copied."""
    pass
