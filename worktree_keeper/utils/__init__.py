"""Utility functions for worktree-keeper.

- threading: worker-count sizing for the parallel PR status fan-out
"""

from .threading import (
    is_free_threading_enabled,
    get_optimal_worker_count,
)

__all__ = [
    "is_free_threading_enabled",
    "get_optimal_worker_count",
]
