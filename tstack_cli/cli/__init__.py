"""
CLI module for the TStack project scaffolder.

Provides the ``tstack`` console script entry point and the per-command
handlers it dispatches to.
"""

from .commands import main

__all__ = ["main"]
