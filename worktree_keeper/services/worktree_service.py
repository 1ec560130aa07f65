"""Worktree lifecycle: list, create and remove worktrees of a project."""
import json
import os
import shutil
import time
from typing import Callable, List, Optional, Union, TYPE_CHECKING

from rich.console import Console

from worktree_keeper.exceptions import (
    FetchFailedError,
    GitOperationError,
    WorktreeCreateError,
    WorktreeNotFoundError,
)
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.project import Project
from worktree_keeper.models.worktree import CreateResult, RemoveResult, Worktree
from worktree_keeper.services.git.operations import GitOperations
from worktree_keeper.services.git.remote import RemoteStatusProbe
from worktree_keeper.services.registry_service import normalize_path
from worktree_keeper.services.state_service import is_within

if TYPE_CHECKING:
    from worktree_keeper.config import Config
    from worktree_keeper.services.github_service import PRStatusService
    from worktree_keeper.services.location_service import LocationService

console = Console()
logger = get_logger(__name__)

ConfirmCallback = Callable[[str], bool]


class WorktreeService:
    """Creates, lists and removes `<worktrees_root>/<project>/<branch>` checkouts.

    The directory tree is the only record of which worktrees exist; every
    call re-reads it.
    """

    def __init__(
        self,
        config: Union["Config", dict],
        git_ops: GitOperations,
        probe: RemoteStatusProbe,
        pr_service: Optional["PRStatusService"] = None,
    ):
        self.config = config
        self.git_ops = git_ops
        self.probe = probe
        self.pr_service = pr_service
        self.remote_name = config.get("remote_name", "origin")
        self.main_branch = config.get("main_branch", "main")
        self.background_checkout = config.get("background_checkout", False)
        self.session_marker = config.get("session_marker", ".claude/settings.local.json")
        self.worktrees_root = normalize_path(config.get("worktrees_root"))

    def worktrees_dir(self, project: Project) -> str:
        return os.path.join(self.worktrees_root, project.name)

    def worktree_path(self, project: Project, branch: str) -> str:
        return os.path.join(self.worktrees_dir(project), branch)

    def count(self, project: Project) -> int:
        """Number of worktree directories a project has."""
        worktrees_dir = self.worktrees_dir(project)
        if not os.path.isdir(worktrees_dir):
            return 0
        with os.scandir(worktrees_dir) as entries:
            return sum(1 for entry in entries if entry.is_dir())

    def _describe(self, path: str, now: float, cwd: Optional[str] = None) -> Worktree:
        mtime = os.stat(path).st_mtime
        return Worktree(
            branch=os.path.basename(path),
            path=path,
            created_at=mtime,
            age_seconds=max(0, int(now - mtime)),
            is_current=bool(cwd) and is_within(normalize_path(cwd), path),
        )

    def list(self, project: Project, with_pr: bool = False, cwd: Optional[str] = None) -> List[Worktree]:
        """All worktrees of project, youngest first.

        Args:
            project: Project to list
            with_pr: Fetch PR status for every worktree (in parallel)
            cwd: Caller's directory, used to flag the current worktree

        Returns:
            Worktrees sorted by ascending age, then name
        """
        worktrees_dir = self.worktrees_dir(project)
        if not os.path.isdir(worktrees_dir):
            return []

        now = time.time()
        with os.scandir(worktrees_dir) as entries:
            paths = [entry.path for entry in entries if entry.is_dir()]
        worktrees = [self._describe(path, now, cwd) for path in paths]
        worktrees.sort(key=lambda wt: (wt.age_seconds, wt.branch))

        if with_pr and worktrees and self.pr_service is not None:
            lookups = self.pr_service.lookup_many([wt.branch for wt in worktrees], project.path)
            for wt in worktrees:
                wt.pr = lookups.get(wt.branch)

        logger.debug(f"Found {len(worktrees)} worktrees for {project.name}")
        return worktrees

    def create(self, project: Project, branch: str) -> CreateResult:
        """Create a worktree for branch, or return the one that already exists.

        Branch names map to one directory level, so "/" is rejected.

        Raises:
            FetchFailedError: the upstream default branch could not be fetched
            WorktreeCreateError: git refused to add the worktree
        """
        if "/" in branch:
            raise WorktreeCreateError(branch, "branch names containing '/' are not supported")
        if branch in (".", ".."):
            raise WorktreeCreateError(branch, "not a valid branch name")

        path = self.worktree_path(project, branch)
        if os.path.isdir(path):
            logger.debug(f"Worktree {path} already exists")
            return CreateResult(self._describe(path, time.time()), created=False)

        upstream = f"{self.remote_name}/{self.main_branch}"
        console.print(f"[blue]{project.name}[/blue] > {branch}")
        console.print(f"Fetching {upstream}...")
        try:
            self.git_ops.fetch_ref(project.path, self.main_branch)
        except GitOperationError as e:
            raise FetchFailedError(upstream, e.message)

        os.makedirs(self.worktrees_dir(project), exist_ok=True)
        # Forget worktrees whose directory was deleted by hand
        self.git_ops.prune_worktrees(project.path)

        if self.git_ops.local_branch_exists(project.path, branch):
            console.print("Creating from existing branch...")
            start_point = None
        else:
            console.print(f"Creating new branch from {upstream}...")
            start_point = upstream

        try:
            self.git_ops.add_worktree(project.path, path, branch, start_point=start_point)
        except GitOperationError as e:
            self._discard_partial(project, path)
            raise WorktreeCreateError(branch, e.message)

        self._write_session_marker(path, branch)

        try:
            self.git_ops.checkout_head(path, background=self.background_checkout)
        except GitOperationError as e:
            console.print(f"[yellow]Warning: checkout in {path} failed; run 'git checkout HEAD' there[/yellow]")
            logger.warning(str(e))

        return CreateResult(self._describe(path, time.time()), created=True)

    def _write_session_marker(self, path: str, branch: str) -> None:
        """Record the branch name in the per-worktree session file."""
        marker = os.path.join(path, self.session_marker)
        os.makedirs(os.path.dirname(marker), exist_ok=True)
        with open(marker, "w") as f:
            json.dump({"name": branch}, f)
            f.write("\n")

    def _discard_partial(self, project: Project, path: str) -> None:
        """Remove whatever a failed `worktree add` left behind."""
        if os.path.isdir(path):
            self.git_ops.remove_worktree(project.path, path, force=True)
            shutil.rmtree(path, ignore_errors=True)
        self.git_ops.prune_worktrees(project.path)

    def remove(
        self,
        project: Project,
        branch: str,
        confirm: ConfirmCallback,
        location: "LocationService",
    ) -> RemoveResult:
        """Remove a worktree and its local branch.

        A branch that still exists on the remote needs confirm() to return
        True before anything is touched.

        Raises:
            WorktreeNotFoundError: no such worktree
            GitOperationError: git could not remove the worktree
        """
        path = self.worktree_path(project, branch)
        if not os.path.isdir(path):
            raise WorktreeNotFoundError(branch)

        if self.probe.branch_exists_on_remote(branch, project.path):
            console.print("[yellow]Warning: Branch still exists on remote[/yellow]")
            if not confirm("Delete anyway?"):
                console.print("[yellow]Cancelled[/yellow]")
                return RemoveResult(branch=branch, cancelled=True)

        result = self.remove_unconditionally(project, branch, location, announce=True)
        if not result.removed:
            raise GitOperationError("worktree_remove", branch, f"{path} is still present")

        console.print(f"[green]Removed {branch}[/green]")
        return result

    def remove_unconditionally(
        self,
        project: Project,
        branch: str,
        location: "LocationService",
        announce: bool = False,
    ) -> RemoveResult:
        """Relocate if needed, drop the worktree, then delete the branch.

        Shared by `rm` (after confirmation) and prune. Branch deletion is
        best effort.
        """
        path = self.worktree_path(project, branch)
        result = RemoveResult(branch=branch)

        if is_within(location.cwd, path):
            if announce:
                console.print("[yellow]Switching to main repo...[/yellow]")
            location.relocate(project.path)
            result.relocated_to = location.cwd

        success, error_msg = self.git_ops.remove_worktree(project.path, path, force=True)
        if not success and os.path.isdir(path):
            # Not (or no longer) a registered worktree: drop the directory itself
            logger.warning(f"git could not remove {path} ({error_msg}); deleting the directory")
            shutil.rmtree(path, ignore_errors=True)
            self.git_ops.prune_worktrees(project.path)

        result.removed = not os.path.isdir(path)
        result.branch_deleted, _ = self.git_ops.delete_branch(project.path, branch)
        return result
