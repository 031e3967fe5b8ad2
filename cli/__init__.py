"""Command-line layer: argument parsing and subcommand handlers.

This package may import from ``core/``, ``sdk/`` and ``config`` only.
"""

from cli.commands import handle_create, handle_get
from cli.dispatcher import build_parser, run
from cli.registry import registry

__all__ = [
    # Dispatcher
    "run",
    "build_parser",
    "registry",
    # Command handlers
    "handle_get",
    "handle_create",
]
