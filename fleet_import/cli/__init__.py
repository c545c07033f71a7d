"""Command line interface (``fleet-import``)."""

from .app import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL, main

__all__ = [
    "EXIT_FATAL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_SUCCESS_ALL",
    "main",
]
