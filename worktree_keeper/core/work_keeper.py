"""Core functionality for worktree-keeper"""

import os
from typing import List, Optional, Union

from rich.console import Console

from worktree_keeper.config import Config
from worktree_keeper.core.navigator import Navigator, Selector
from worktree_keeper.exceptions import NotAGitRepositoryError, UsageError
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.project import Project
from worktree_keeper.models.prune import PruneResult
from worktree_keeper.models.worktree import CreateResult, RemoveResult, Worktree
from worktree_keeper.services.display_service import DisplayService
from worktree_keeper.services.git import GitOperations, RemoteStatusProbe
from worktree_keeper.services.github_service import PRStatusService
from worktree_keeper.services.location_service import LocationService
from worktree_keeper.services.prune_service import PruneService
from worktree_keeper.services.registry_service import ProjectRegistry, normalize_path
from worktree_keeper.services.state_service import StateDetector
from worktree_keeper.services.worktree_service import ConfirmCallback, WorktreeService

console = Console()
logger = get_logger(__name__)


class WorkKeeper:
    """Wires the services together and implements each `work` command."""

    def __init__(
        self,
        config: Union[Config, dict],
        location: Optional[LocationService] = None,
        selector: Optional[Selector] = None,
        confirm: Optional[ConfirmCallback] = None,
    ):
        """Initialize WorkKeeper.

        Args:
            config: Configuration dict or Config object
            location: Tracks the process cwd and the pending shell cd
            selector: Picker used by the navigator (default: Textual picker)
            confirm: Yes/no prompt used by `rm` (default: rich Confirm)
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.verbose = self.config.get("verbose", False)
        self.debug_mode = self.config.get("debug", False)

        self.location = location or LocationService(mise_trust=self.config.mise_trust)
        self.selector = selector or _default_selector
        self.confirm = confirm or _default_confirm

        self.git_ops = GitOperations(self.config)
        self.probe = RemoteStatusProbe(self.git_ops, ignored_paths=[self.config.session_marker])
        self.registry = ProjectRegistry(self.config, self.git_ops)
        self.state = StateDetector(self.config, self.registry)
        self.pr_service = PRStatusService(self.config, self.git_ops)
        self.worktrees = WorktreeService(self.config, self.git_ops, self.probe, self.pr_service)
        self.pruner = PruneService(self.git_ops, self.probe, self.worktrees)
        self.display = DisplayService(verbose=self.verbose, debug=self.debug_mode)

    @property
    def cwd(self) -> str:
        return self.location.cwd

    def navigate(self) -> Optional[str]:
        """Interactive drill-down; relocates to the chosen directory."""
        navigator = Navigator(self.registry, self.state, self.worktrees, self.selector)
        target = navigator.run(self.cwd)
        if target is not None:
            self.location.relocate(target)
        return target

    def list_worktrees(self) -> List[Worktree]:
        """`work ls`: current project's worktrees with PR status."""
        project = self.state.require_project(self.cwd)
        worktrees = self.worktrees.list(project, with_pr=True, cwd=self.cwd)
        self.display.display_worktrees(project, worktrees)
        return worktrees

    def remove(self, branch: Optional[str] = None) -> RemoveResult:
        """`work rm [branch]`; branch defaults to the worktree containing cwd."""
        project = self.state.require_project(self.cwd)
        if not branch:
            branch = self.state.current_worktree_branch(self.cwd, project)
            if not branch:
                raise UsageError("Usage: work rm <branch>")
        console.print(f"Removing '{branch}'...")
        return self.worktrees.remove(project, branch, self.confirm, self.location)

    def prune(self) -> PruneResult:
        """`work prune` across every registered project."""
        return self.pruner.prune_all(self.registry.load(), self.location)

    def add_project(self, path: Optional[str] = None) -> Project:
        """`work add [path]`."""
        project = self.registry.add(path or self.cwd)
        console.print(f"[green]Registered {project.name}[/green] ({project.path})")
        return project

    def _project_for_branch_command(self) -> Project:
        """Current project, registering the enclosing repository when needed."""
        project = self.state.current_project(self.cwd)
        if project is not None:
            return project

        repo_root = self.git_ops.find_repo_root(self.cwd)
        if repo_root is None:
            raise NotAGitRepositoryError(self.cwd)
        repo_root = normalize_path(repo_root)

        for registered in self.registry.load():
            if normalize_path(registered.path) == repo_root:
                return registered

        console.print(f"Registering '{os.path.basename(repo_root)}'...")
        return self.registry.add(repo_root)

    def open_branch(self, branch: str) -> CreateResult:
        """`work <branch>`: create the worktree if needed and move into it."""
        project = self._project_for_branch_command()
        result = self.worktrees.create(project, branch)
        self.location.relocate(result.worktree.path)
        return result

    def finish(self) -> Optional[str]:
        """Hand the final directory to the shell wrapper."""
        return self.location.finish()

    def close(self) -> None:
        """Release network resources."""
        self.pr_service.close()


def _default_selector(labels: List[str], prompt: str) -> Optional[int]:
    from worktree_keeper.ui.picker import fuzzy_select

    return fuzzy_select(labels, prompt)


def _default_confirm(question: str) -> bool:
    from rich.prompt import Confirm

    return Confirm.ask(question, default=False)
