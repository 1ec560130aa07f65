"""Works out which project (and worktree) the caller is standing in."""
import os
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from worktree_keeper.exceptions import NotRegisteredProjectError
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.project import Project
from worktree_keeper.services.registry_service import normalize_path

if TYPE_CHECKING:
    from worktree_keeper.config import Config
    from worktree_keeper.services.registry_service import ProjectRegistry

logger = get_logger(__name__)


def is_within(path: str, root: str) -> bool:
    """True when path is root itself or lies below it (whole segments only)."""
    path = path.rstrip(os.sep) or os.sep
    root = root.rstrip(os.sep) or os.sep
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


class StateDetector:
    """Resolves the current project from a working directory."""

    def __init__(self, config: "Config", registry: "ProjectRegistry"):
        self.config = config
        self.registry = registry

    @property
    def worktrees_root(self) -> str:
        return normalize_path(self.config.worktrees_root)

    def current_project(self, cwd: str, projects: Optional[List[Project]] = None) -> Optional[Project]:
        """Return the project cwd belongs to, or None.

        A directory under the worktrees root resolves by its first path
        segment, even when it is also nested inside some project's checkout.
        Otherwise the first project (registry order) containing cwd wins.
        """
        if projects is None:
            projects = self.registry.load()
        cwd = normalize_path(cwd)

        root = self.worktrees_root
        if cwd != root and is_within(cwd, root):
            candidate = Path(os.path.relpath(cwd, root)).parts[0]
            for project in projects:
                if project.name == candidate:
                    logger.debug(f"{cwd} is a worktree of {project.name}")
                    return project

        for project in projects:
            if is_within(cwd, normalize_path(project.path)):
                logger.debug(f"{cwd} is inside main checkout of {project.name}")
                return project

        return None

    def require_project(self, cwd: str) -> Project:
        """Like current_project but raises when nothing matches.

        Raises:
            NotRegisteredProjectError: cwd is not inside any registered project
        """
        project = self.current_project(cwd)
        if project is None:
            raise NotRegisteredProjectError(cwd)
        return project

    def project_worktrees_dir(self, project: Project) -> str:
        return os.path.join(self.worktrees_root, project.name)

    def current_worktree_branch(self, cwd: str, project: Project) -> Optional[str]:
        """Branch directory of project that cwd is inside, if any."""
        cwd = normalize_path(cwd)
        worktrees_dir = self.project_worktrees_dir(project)
        if cwd == worktrees_dir or not is_within(cwd, worktrees_dir):
            return None
        return Path(os.path.relpath(cwd, worktrees_dir)).parts[0]

    def is_in_main_checkout(self, cwd: str, project: Project) -> bool:
        """cwd is inside the project's main checkout and not in a worktree."""
        cwd = normalize_path(cwd)
        return is_within(cwd, normalize_path(project.path)) and not is_within(cwd, self.worktrees_root)
