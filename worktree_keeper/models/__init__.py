"""Data models for worktree-keeper."""

from .project import Project
from .worktree import Worktree, CreateResult, RemoveResult
from .pr import PRState, BuildStatus, PRStatus, PRLookup, LookupOutcome, CheckState
from .navigation import NavigationChoice, NavState
from .prune import PruneResult, ProjectPruneResult

__all__ = [
    "Project",
    "Worktree",
    "CreateResult",
    "RemoveResult",
    "PRState",
    "BuildStatus",
    "PRStatus",
    "PRLookup",
    "LookupOutcome",
    "CheckState",
    "NavigationChoice",
    "NavState",
    "PruneResult",
    "ProjectPruneResult",
]
