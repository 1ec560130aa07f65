"""Formatting utilities for worktree-keeper.

This package provides formatting functions used by both the plain console
output and the interactive picker labels.
"""

from .date import format_time_ago
from .status import (
    format_pr_state,
    format_build_icon,
    format_pr_summary,
    format_pr_plain,
    format_worktree_count,
    shorten_home,
)

__all__ = [
    "format_time_ago",
    "format_pr_state",
    "format_build_icon",
    "format_pr_summary",
    "format_pr_plain",
    "format_worktree_count",
    "shorten_home",
]
