"""Navigator view-models."""

from dataclasses import dataclass
from enum import Enum


class NavState(Enum):
    """States of the two-level navigator."""
    PROJECT_LIST = "project_list"
    WORKTREE_LIST = "worktree_list"
    DONE = "done"
    EXIT = "exit"


# Id of the synthetic row pointing at the project's main checkout
MAIN_REPO_ID = "__main__"


@dataclass(frozen=True)
class NavigationChoice:
    """One row offered to the fuzzy picker."""
    id: str
    label: str
    age_rank: int
