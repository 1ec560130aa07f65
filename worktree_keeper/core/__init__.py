"""Core flows for worktree-keeper."""

from .navigator import Navigator
from .work_keeper import WorkKeeper

__all__ = ["Navigator", "WorkKeeper"]
