"""Tests for the Navigator state machine"""
import os
import time
from unittest.mock import Mock

import pytest

from worktree_keeper.core.navigator import Navigator
from worktree_keeper.models.navigation import NavState
from worktree_keeper.models.pr import PRLookup, PRState, PRStatus
from worktree_keeper.models.project import Project


class ScriptedSelector:
    """Selector stand-in that answers from a script and records prompts."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = []

    def __call__(self, labels, prompt):
        self.calls.append((prompt, list(labels)))
        answer = self.answers.pop(0)
        if callable(answer):
            return answer(labels)
        return answer


def pick(text):
    """Answer with the index of the first label containing text."""
    def _pick(labels):
        return next(i for i, label in enumerate(labels) if text in label)
    return _pick


@pytest.fixture
def two_projects(registry, config, temp_dir, project):
    other = temp_dir / "other"
    other.mkdir()
    projects = [project, Project("other", str(other))]
    registry.save(projects)
    now = time.time()
    for name, age in [("older", 7200), ("newer", 120)]:
        path = config.worktrees_root / "myproj" / name
        path.mkdir(parents=True)
        os.utime(path, (now - age, now - age))
    return projects


def make_navigator(registry, state, worktree_service, answers):
    selector = ScriptedSelector(answers)
    return Navigator(registry, state, worktree_service, selector), selector


class TestNavigator:
    """Test transitions and labels."""

    def test_no_projects(self, registry, state, worktree_service, temp_dir):
        navigator, selector = make_navigator(registry, state, worktree_service, [])

        assert navigator.run(str(temp_dir)) is None
        assert selector.calls == []

    def test_starts_in_project_list_outside_projects(self, registry, state, worktree_service, two_projects, temp_dir):
        navigator, selector = make_navigator(
            registry, state, worktree_service, [pick("myproj"), pick("newer")]
        )

        target = navigator.run(str(temp_dir))

        assert target.endswith(os.path.join("myproj", "newer"))
        assert selector.calls[0][0] == "Select project: "
        assert selector.calls[1][0] == "myproj [esc=back]: "

    def test_project_labels(self, registry, state, worktree_service, two_projects, temp_dir):
        navigator, selector = make_navigator(registry, state, worktree_service, [None])

        navigator.run(str(temp_dir))

        labels = selector.calls[0][1]
        assert labels[0].startswith("myproj  2 worktrees  ")
        assert labels[1].startswith("other  no worktrees  ")

    def test_starts_in_worktree_list_inside_project(self, registry, state, worktree_service, two_projects, project):
        navigator, selector = make_navigator(registry, state, worktree_service, [0])

        target = navigator.run(project.path)

        assert target == project.path
        prompt, labels = selector.calls[0]
        assert prompt == "myproj [esc=back]: "
        assert labels[0] == "main  (main repo) <- current"
        assert labels[1].startswith("newer  (2 minutes ago)")
        assert labels[2].startswith("older  (2 hours ago)")

    def test_current_worktree_marked(self, registry, state, worktree_service, two_projects, config):
        navigator, selector = make_navigator(registry, state, worktree_service, [None, None])
        cwd = str(config.worktrees_root / "myproj" / "older")

        navigator.run(cwd)

        labels = selector.calls[0][1]
        assert labels[0] == "main  (main repo)"
        assert labels[2].endswith("<- current")
        assert selector.calls[1][1][0].endswith("<- current")  # myproj row

    def test_back_from_worktree_list_then_exit(self, registry, state, worktree_service, two_projects, project):
        navigator, selector = make_navigator(registry, state, worktree_service, [None, None])

        assert navigator.run(project.path) is None
        assert [call[0] for call in selector.calls] == ["myproj [esc=back]: ", "Select project: "]

    def test_back_then_other_project(self, registry, state, worktree_service, two_projects, project):
        navigator, selector = make_navigator(
            registry, state, worktree_service, [None, pick("other"), 0]
        )

        assert navigator.run(project.path) == two_projects[1].path

    def test_pr_status_in_labels(self, registry, state, config, git_ops, probe, two_projects, project):
        from worktree_keeper.services.worktree_service import WorktreeService

        pr_service = Mock()
        pr_service.lookup_many.return_value = {
            "newer": PRLookup.found(PRStatus(42, "u", PRState.OPEN, 3, 3, 0, 0)),
            "older": PRLookup.failed("boom"),
        }
        service = WorktreeService(config, git_ops, probe, pr_service)
        navigator, selector = make_navigator(registry, state, service, [None, None])

        navigator.run(project.path)

        labels = selector.calls[0][1]
        assert labels[1] == "newer  (2 minutes ago) #42 OPEN passing 3/3"
        assert labels[2] == "older  (2 hours ago)"

    def test_step_from_terminal_state(self, registry, state, worktree_service):
        navigator, _ = make_navigator(registry, state, worktree_service, [])

        with pytest.raises(ValueError):
            navigator.step(NavState.DONE, None, [], "/")
