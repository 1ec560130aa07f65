"""Batch removal of worktrees whose branch is gone from the remote."""
from typing import List, TYPE_CHECKING

from rich.console import Console

from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.project import Project
from worktree_keeper.models.prune import ProjectPruneResult, PruneResult
from worktree_keeper.services.git.operations import GitOperations
from worktree_keeper.services.git.remote import RemoteStatusProbe
from worktree_keeper.services.registry_service import normalize_path
from worktree_keeper.services.worktree_service import WorktreeService

if TYPE_CHECKING:
    from worktree_keeper.services.location_service import LocationService

console = Console()
logger = get_logger(__name__)


class PruneService:
    """Walks every project and removes worktrees that are safe to drop.

    Safe means: the branch no longer exists on the remote and the worktree
    has no uncommitted or unpushed work. Never prompts.
    """

    def __init__(self, git_ops: GitOperations, probe: RemoteStatusProbe, worktrees: WorktreeService):
        self.git_ops = git_ops
        self.probe = probe
        self.worktrees = worktrees

    def prune_all(self, projects: List[Project], location: "LocationService") -> PruneResult:
        """Prune every registered project and print a summary."""
        result = PruneResult()

        for project in projects:
            project_result = self.prune_project(project, location)
            if project_result is not None:
                result.add(project_result)

        console.print("")
        if result.pruned_count > 0:
            console.print(
                f"[green]Pruned {result.pruned_count} worktree(s) across "
                f"{len(result.pruned_projects)} project(s)[/green]"
            )
        else:
            console.print("[yellow]No worktrees to prune[/yellow]")
        if result.skipped_count > 0:
            console.print(f"[yellow]Skipped {result.skipped_count} with local changes[/yellow]")

        return result

    def prune_project(self, project: Project, location: "LocationService"):
        """Prune one project; None when it has no worktrees at all."""
        worktrees = self.worktrees.list(project)
        if not worktrees:
            return None

        project_result = ProjectPruneResult(name=project.name)

        console.print(f"[blue]{project.name}[/blue] - fetching...")
        success, error_msg = self.git_ops.fetch_prune(project.path)
        if not success:
            # Keep going: remote queries below still decide per worktree
            project_result.fetch_failed = True
            logger.warning(f"Fetch failed for {project.name}: {error_msg}")

        for worktree in worktrees:
            branch = worktree.branch

            if self.probe.branch_exists_on_remote(branch, project.path):
                logger.debug(f"{project.name}/{branch} still on remote, keeping")
                continue

            if not self._is_worktree(worktree.path):
                console.print(
                    f"  [yellow]{branch}[/yellow]  [red]not a git worktree - skipped (use work rm)[/red]"
                )
                project_result.failed.append(branch)
                continue

            if self.probe.has_local_changes(worktree.path):
                console.print(
                    f"  [yellow]{branch}[/yellow]  [red]has local changes - skipped[/red]"
                )
                project_result.skipped.append(branch)
                continue

            removal = self.worktrees.remove_unconditionally(project, branch, location)
            if removal.removed:
                console.print(f"  [bright_black]{branch}[/bright_black]  [green]removed[/green]")
                project_result.pruned.append(branch)
            else:
                console.print(f"  [yellow]{branch}[/yellow]  [red]could not be removed[/red]")
                project_result.failed.append(branch)

        return project_result

    def _is_worktree(self, path: str) -> bool:
        """The directory is the top of a git checkout, not a stray folder."""
        root = self.git_ops.find_repo_root(path)
        return root is not None and normalize_path(root) == normalize_path(path)
