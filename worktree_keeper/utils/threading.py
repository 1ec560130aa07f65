"""Threading utilities for sizing the parallel lookup pool."""

import os
import sys
from typing import Optional

# GitHub rate limits make more than this many concurrent requests pointless
MAX_API_WORKERS = 10


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with GIL disabled (free-threading mode)
        False if running with GIL enabled or Python < 3.13
    """
    try:
        return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()
    except Exception:
        return False


def get_optimal_worker_count(user_specified: Optional[int] = None, tasks: Optional[int] = None) -> int:
    """Calculate how many threads to use for I/O-bound lookups.

    Args:
        user_specified: User-specified worker count, if provided
        tasks: Number of tasks to run; the pool never exceeds it

    Returns:
        Number of workers, at least 1
    """
    if user_specified is not None and user_specified > 0:
        workers = user_specified
    else:
        cpu_count = os.cpu_count() or 1
        if is_free_threading_enabled():
            workers = min(64, cpu_count * 2)
        else:
            # CPU_count + 4 is a good heuristic for I/O-bound work
            workers = min(32, cpu_count + 4)
        workers = min(workers, MAX_API_WORKERS)

    if tasks is not None:
        workers = min(workers, max(tasks, 1))
    return max(workers, 1)
