"""Worktree data models."""

from dataclasses import dataclass
from typing import Optional

from worktree_keeper.models.pr import PRLookup


@dataclass
class Worktree:
    """A worktree derived from `<worktrees_root>/<project>/<branch>`."""

    branch: str
    path: str
    created_at: float  # Directory mtime, used as an age proxy
    age_seconds: int = 0
    is_current: bool = False
    pr: Optional[PRLookup] = None  # None = not queried yet

    def __str__(self) -> str:
        """String representation of worktree."""
        current_marker = " (current)" if self.is_current else ""
        return f"{self.branch} @ {self.path}{current_marker}"


@dataclass
class CreateResult:
    """Outcome of WorktreeService.create."""

    worktree: Worktree
    created: bool  # False when the worktree already existed


@dataclass
class RemoveResult:
    """Outcome of WorktreeService.remove."""

    branch: str
    removed: bool = False
    cancelled: bool = False
    branch_deleted: bool = False
    relocated_to: Optional[str] = None
