"""Command-line interface for worktree-keeper.

This package provides the CLI entry point and argument parsing.
"""

from .main import main, run
from .args import parse_args

__all__ = ["main", "run", "parse_args"]
