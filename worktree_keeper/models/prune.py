"""Prune result models."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class ProjectPruneResult:
    """What prune did inside one project."""

    name: str
    pruned: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    fetch_failed: bool = False


@dataclass
class PruneResult:
    """Aggregate of a prune run across every registered project."""

    pruned_count: int = 0
    skipped_count: int = 0
    pruned_projects: List[str] = field(default_factory=list)
    per_project: Dict[str, ProjectPruneResult] = field(default_factory=dict)

    def add(self, project_result: ProjectPruneResult) -> None:
        self.per_project[project_result.name] = project_result
        self.pruned_count += len(project_result.pruned)
        self.skipped_count += len(project_result.skipped)
        if project_result.pruned:
            self.pruned_projects.append(project_result.name)
