"""Console rendering for `work ls` and related messages."""
from typing import List

from rich.console import Console

from worktree_keeper.constants import SYMBOL_CURRENT
from worktree_keeper.formatters import format_pr_summary, format_time_ago
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.project import Project
from worktree_keeper.models.pr import LookupOutcome
from worktree_keeper.models.worktree import Worktree

console = Console()
logger = get_logger(__name__)


class DisplayService:
    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug_mode = debug

    def format_worktree_line(self, worktree: Worktree) -> str:
        """One `ls` line: name, age, current marker, PR summary."""
        parts = [
            f"  [bold]{worktree.branch}[/bold]",
            f"[bright_black]({format_time_ago(worktree.age_seconds)})[/bright_black]",
        ]
        if worktree.is_current:
            parts.append(f"[cyan]{SYMBOL_CURRENT}[/cyan]")
        if worktree.pr is not None:
            if worktree.pr.status is not None:
                parts.append(format_pr_summary(worktree.pr.status))
            elif worktree.pr.outcome == LookupOutcome.FAILED and self.verbose:
                parts.append("[bright_black](PR status unavailable)[/bright_black]")
        return " ".join(parts)

    def display_worktrees(self, project: Project, worktrees: List[Worktree]) -> None:
        """Print a project's worktrees, youngest first."""
        if not worktrees:
            console.print(f"[yellow]No worktrees for {project.name}[/yellow]")
            return

        console.print(f"[blue]{project.name}[/blue] worktrees:")
        for worktree in worktrees:
            console.print(self.format_worktree_line(worktree))

        if self.debug_mode:
            failed = [wt.branch for wt in worktrees if wt.pr and wt.pr.outcome == LookupOutcome.FAILED]
            if failed:
                logger.debug(f"PR lookup failed for: {', '.join(failed)}")
