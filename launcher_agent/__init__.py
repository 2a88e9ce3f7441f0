"""Desktop launcher agent: source daemons, catalog search and single-instance coordination."""

__version__ = "0.1.0"
