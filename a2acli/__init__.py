"""a2acli - command-line client for A2A task services."""

__version__ = "0.4.0"
