"""Tests for StateDetector"""
import pytest

from worktree_keeper.exceptions import NotRegisteredProjectError
from worktree_keeper.models.project import Project
from worktree_keeper.services.state_service import is_within


class TestIsWithin:
    """Test path containment."""

    @pytest.mark.parametrize("path,root,expected", [
        ("/src/app", "/src/app", True),
        ("/src/app/lib", "/src/app", True),
        ("/src/app/", "/src/app", True),
        ("/src/application", "/src/app", False),
        ("/src", "/src/app", False),
        ("/anything", "/", True),
    ])
    def test_segment_boundaries(self, path, root, expected):
        assert is_within(path, root) is expected


class TestCurrentProject:
    """Test project detection order."""

    def test_main_checkout(self, state, temp_dir):
        app = temp_dir / "app"
        (app / "src").mkdir(parents=True)
        projects = [Project("app", str(app))]

        assert state.current_project(str(app / "src"), projects) == projects[0]

    def test_prefix_sibling_is_not_a_match(self, state, temp_dir):
        (temp_dir / "app").mkdir()
        (temp_dir / "app-tools").mkdir()
        projects = [Project("app", str(temp_dir / "app"))]

        assert state.current_project(str(temp_dir / "app-tools"), projects) is None

    def test_worktree_resolves_by_first_segment(self, state, config, temp_dir):
        (temp_dir / "app").mkdir()
        wt = config.worktrees_root / "app" / "feature" / "src"
        wt.mkdir(parents=True)
        projects = [Project("app", str(temp_dir / "app"))]

        assert state.current_project(str(wt), projects) == projects[0]

    def test_worktrees_root_wins_over_enclosing_checkout(self, temp_dir, registry):
        # Worktrees root nested inside a registered checkout
        from worktree_keeper.config import Config
        from worktree_keeper.services.state_service import StateDetector

        outer = temp_dir / "outer"
        (outer / "trees" / "inner" / "feature").mkdir(parents=True)
        (temp_dir / "inner").mkdir()
        config = Config(config_dir=temp_dir / "config", worktrees_root=outer / "trees")
        projects = [Project("outer", str(outer)), Project("inner", str(temp_dir / "inner"))]
        detector = StateDetector(config, registry)

        found = detector.current_project(str(outer / "trees" / "inner" / "feature"), projects)

        assert found.name == "inner"

    def test_first_registered_wins_for_nested_checkouts(self, state, temp_dir):
        (temp_dir / "outer" / "inner").mkdir(parents=True)
        projects = [
            Project("outer", str(temp_dir / "outer")),
            Project("inner", str(temp_dir / "outer" / "inner")),
        ]

        assert state.current_project(str(temp_dir / "outer" / "inner"), projects).name == "outer"

    def test_unknown_worktree_dir_falls_through(self, state, config):
        stray = config.worktrees_root / "ghost" / "branch"
        stray.mkdir(parents=True)

        assert state.current_project(str(stray), []) is None

    def test_reads_registry_when_projects_not_given(self, state, registered_project):
        assert state.current_project(registered_project.path) == registered_project

    def test_require_project_raises(self, state, temp_dir):
        with pytest.raises(NotRegisteredProjectError, match="Not in a registered project"):
            state.require_project(str(temp_dir))


class TestWorktreeBranch:
    """Test current worktree detection."""

    def test_branch_from_nested_directory(self, state, config):
        project = Project("app", "/src/app")
        nested = config.worktrees_root / "app" / "feature-x" / "src"
        nested.mkdir(parents=True)

        assert state.current_worktree_branch(str(nested), project) == "feature-x"

    def test_none_in_main_checkout(self, state, temp_dir):
        (temp_dir / "app").mkdir()
        project = Project("app", str(temp_dir / "app"))

        assert state.current_worktree_branch(str(temp_dir / "app"), project) is None
        assert state.is_in_main_checkout(str(temp_dir / "app"), project)

    def test_not_in_main_checkout_from_worktree(self, state, config, temp_dir):
        (temp_dir / "app").mkdir()
        wt = config.worktrees_root / "app" / "feature-x"
        wt.mkdir(parents=True)
        project = Project("app", str(temp_dir / "app"))

        assert not state.is_in_main_checkout(str(wt), project)


class TestRegistryRoundTrip:
    def test_added_project_is_detected_from_inside(self, registry, state, git_repo, temp_dir):
        subdir = temp_dir / "myproj" / "src" / "pkg"
        subdir.mkdir(parents=True)

        project = registry.add(git_repo.working_tree_dir)

        assert state.current_project(str(subdir)) == project
        assert state.require_project(git_repo.working_tree_dir) == project
