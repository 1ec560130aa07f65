"""Git-related services for worktree-keeper."""

from .operations import GitOperations
from .remote import RemoteStatusProbe

__all__ = [
    "GitOperations",
    "RemoteStatusProbe",
]
