"""Persistent registry of projects (name -> main checkout path)."""
import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union, TYPE_CHECKING

from worktree_keeper.exceptions import (
    AlreadyRegisteredError,
    NotAGitRepositoryError,
    RegistryCorruptError,
)
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.project import Project
from worktree_keeper.services.git.operations import GitOperations

if TYPE_CHECKING:
    from worktree_keeper.config import Config

logger = get_logger(__name__)


def normalize_path(path: Union[str, Path]) -> str:
    """Absolute, symlink-free form of path used for comparisons."""
    return os.path.realpath(os.path.expanduser(str(path)))


class ProjectRegistry:
    """Owns the project list and its JSON file.

    The file is read and rewritten whole on every change. There is no
    locking: one invocation at a time is assumed.
    """

    def __init__(self, config: "Config", git_ops: GitOperations):
        self.config = config
        self.git_ops = git_ops
        self.projects_file: Path = config.projects_file

    def load(self) -> List[Project]:
        """Return registered projects in registration order.

        A missing registry file is an empty registry.
        """
        if not self.projects_file.exists():
            return []

        try:
            with open(self.projects_file) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise RegistryCorruptError(str(self.projects_file), str(e))

        if not isinstance(data, list):
            raise RegistryCorruptError(str(self.projects_file), "expected a list of projects")

        projects = []
        for record in data:
            if not isinstance(record, dict) or not record.get("name") or not record.get("path"):
                logger.warning(f"Skipping malformed registry entry: {record!r}")
                continue
            projects.append(Project(name=str(record["name"]), path=str(record["path"])))
        return projects

    def save(self, projects: List[Project]) -> None:
        """Overwrite the registry with projects."""
        self.projects_file.parent.mkdir(parents=True, exist_ok=True)
        payload = [project.to_dict() for project in projects]

        # Write next to the target and rename so a crash never truncates it
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.projects_file.parent), prefix=".projects-", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.projects_file)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Saved {len(projects)} project(s) to {self.projects_file}")

    def get(self, name: str) -> Optional[Project]:
        """Look up a project by exact name."""
        for project in self.load():
            if project.name == name:
                return project
        return None

    def add(self, path: Optional[str] = None) -> Project:
        """Register the repository containing path (default: cwd).

        Raises:
            NotAGitRepositoryError: path is not inside a git repository
            AlreadyRegisteredError: the name or the path is already taken
        """
        target = normalize_path(path if path else os.getcwd())
        repo_root = self.git_ops.find_repo_root(target) if os.path.isdir(target) else None
        if repo_root is None:
            raise NotAGitRepositoryError(target)

        repo_root = normalize_path(repo_root)
        name = os.path.basename(repo_root)

        projects = self.load()
        for project in projects:
            if project.name == name:
                raise AlreadyRegisteredError(name, repo_root, field="name")
        for project in projects:
            if normalize_path(project.path) == repo_root:
                raise AlreadyRegisteredError(project.name, repo_root, field="path")

        project = Project(name=name, path=repo_root)
        projects.append(project)
        self.save(projects)
        logger.info(f"Registered {project}")
        return project
