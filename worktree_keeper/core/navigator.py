"""Two-level interactive navigation: project list, then worktree list."""

from typing import Callable, List, Optional, Tuple

from rich.console import Console

from worktree_keeper.constants import (
    MAIN_REPO_LABEL,
    PROJECT_PROMPT,
    SYMBOL_CURRENT,
    WORKTREE_PROMPT,
)
from worktree_keeper.formatters import (
    format_pr_plain,
    format_time_ago,
    format_worktree_count,
    shorten_home,
)
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.navigation import MAIN_REPO_ID, NavigationChoice, NavState
from worktree_keeper.models.project import Project
from worktree_keeper.services.registry_service import ProjectRegistry
from worktree_keeper.services.state_service import StateDetector
from worktree_keeper.services.worktree_service import WorktreeService

console = Console()
logger = get_logger(__name__)

Selector = Callable[[List[str], str], Optional[int]]


class Navigator:
    """Drives the project -> worktree drill-down.

    States: PROJECT_LIST, WORKTREE_LIST(project), DONE(path), EXIT.
    Cancelling the worktree list returns to the project list; cancelling the
    project list exits. The actual choosing is done by ``selector``, which
    receives the ordered labels and returns an index or None.
    """

    def __init__(
        self,
        registry: ProjectRegistry,
        state: StateDetector,
        worktrees: WorktreeService,
        selector: Selector,
    ):
        self.registry = registry
        self.state = state
        self.worktrees = worktrees
        self.selector = selector

    def project_choices(self, projects: List[Project], current: Optional[Project]) -> List[NavigationChoice]:
        """Rows for the project list, in registry order."""
        choices = []
        for rank, project in enumerate(projects):
            count = self.worktrees.count(project)
            label = f"{project.name}  {format_worktree_count(count)}  {shorten_home(project.path)}"
            if current is not None and current.name == project.name:
                label += f" {SYMBOL_CURRENT}"
            choices.append(NavigationChoice(id=project.name, label=label, age_rank=rank))
        return choices

    def worktree_choices(self, project: Project, cwd: str) -> List[NavigationChoice]:
        """Rows for a project's worktree list, main checkout first."""
        main_label = MAIN_REPO_LABEL
        if self.state.is_in_main_checkout(cwd, project):
            main_label += f" {SYMBOL_CURRENT}"
        choices = [NavigationChoice(id=MAIN_REPO_ID, label=main_label, age_rank=0)]

        for rank, worktree in enumerate(self.worktrees.list(project, with_pr=True, cwd=cwd), start=1):
            label = f"{worktree.branch}  ({format_time_ago(worktree.age_seconds)})"
            if worktree.pr is not None and worktree.pr.status is not None:
                label += f" {format_pr_plain(worktree.pr.status)}"
            if worktree.is_current:
                label += f" {SYMBOL_CURRENT}"
            choices.append(NavigationChoice(id=worktree.path, label=label, age_rank=rank))
        return choices

    def _select(self, choices: List[NavigationChoice], prompt: str) -> Optional[NavigationChoice]:
        index = self.selector([choice.label for choice in choices], prompt)
        if index is None or not 0 <= index < len(choices):
            return None
        return choices[index]

    def step(
        self, state: NavState, project: Optional[Project], projects: List[Project], cwd: str
    ) -> Tuple[NavState, Optional[Project], Optional[str]]:
        """Run one prompt and return (next_state, project, target_path)."""
        if state == NavState.PROJECT_LIST:
            current = self.state.current_project(cwd, projects)
            choice = self._select(self.project_choices(projects, current), PROJECT_PROMPT)
            if choice is None:
                return NavState.EXIT, None, None
            chosen = next(p for p in projects if p.name == choice.id)
            return NavState.WORKTREE_LIST, chosen, None

        if state == NavState.WORKTREE_LIST:
            assert project is not None
            prompt = WORKTREE_PROMPT.format(project=project.name)
            choice = self._select(self.worktree_choices(project, cwd), prompt)
            if choice is None:
                return NavState.PROJECT_LIST, None, None
            if choice.id == MAIN_REPO_ID:
                return NavState.DONE, project, project.path
            return NavState.DONE, project, choice.id

        raise ValueError(f"No transition out of terminal state {state}")

    def run(self, cwd: str) -> Optional[str]:
        """Run the navigator; returns the chosen directory or None on exit."""
        projects = self.registry.load()
        if not projects:
            console.print("[yellow]No projects registered[/yellow]")
            console.print("Use [cyan]work add[/cyan] to register a project")
            return None

        project = self.state.current_project(cwd, projects)
        state = NavState.WORKTREE_LIST if project is not None else NavState.PROJECT_LIST
        target = None

        while state not in (NavState.DONE, NavState.EXIT):
            state, project, target = self.step(state, project, projects, cwd)
            logger.debug(f"Navigator -> {state.value} ({project.name if project else '-'})")

        return target if state == NavState.DONE else None
