"""Pytest fixtures for worktree-keeper tests"""
import os
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from worktree_keeper.config import Config
from worktree_keeper.models.project import Project
from worktree_keeper.services.git import GitOperations, RemoteStatusProbe
from worktree_keeper.services.location_service import LocationService
from worktree_keeper.services.registry_service import ProjectRegistry
from worktree_keeper.services.state_service import StateDetector
from worktree_keeper.services.worktree_service import WorktreeService


def _configure_user(repo: git.Repo) -> None:
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep tests away from the caller's shell wrapper, token and cwd."""
    monkeypatch.delenv("WORK_CD_FILE", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("WORK_CONFIG_DIR", raising=False)
    monkeypatch.delenv("WORK_WORKTREES_DIR", raising=False)
    monkeypatch.delenv("WORK_MAIN_BRANCH", raising=False)
    # Restored at teardown, since relocation chdirs the test process
    monkeypatch.chdir(os.getcwd())


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def config(temp_dir):
    """Config rooted entirely inside the temp directory."""
    return Config(
        config_dir=temp_dir / "config",
        worktrees_root=temp_dir / "worktrees",
        github_token=None,
        mise_trust=False,
    )


@pytest.fixture
def origin_repo(temp_dir):
    """Bare repository acting as `origin`, with one commit on main."""
    bare_path = temp_dir / "origin.git"
    bare = git.Repo.init(bare_path, bare=True)
    bare.git.symbolic_ref("HEAD", "refs/heads/main")

    seed_path = temp_dir / "seed"
    seed = git.Repo.init(seed_path)
    _configure_user(seed)
    (seed_path / "README.md").write_text("# Test Repository\n")
    seed.index.add(["README.md"])
    seed.index.commit("Initial commit")
    seed.git.branch("-M", "main")
    seed.create_remote("origin", str(bare_path))
    seed.git.push("origin", "main")
    seed.close()

    yield bare
    bare.close()


@pytest.fixture
def git_repo(temp_dir, origin_repo):
    """Clone of origin named `myproj`, the main checkout of a project."""
    repo = git.Repo.clone_from(origin_repo.git_dir, str(temp_dir / "myproj"))
    _configure_user(repo)
    yield repo
    repo.close()


@pytest.fixture
def make_commit():
    """Return a helper that commits one file in a checkout."""
    def _make_commit(path, name="change.txt", content="change\n", message="Change"):
        repo = git.Repo(path)
        try:
            (Path(path) / name).write_text(content)
            repo.index.add([name])
            repo.index.commit(message)
        finally:
            repo.close()
    return _make_commit


@pytest.fixture
def project(git_repo):
    return Project(name="myproj", path=git_repo.working_tree_dir)


@pytest.fixture
def git_ops(config):
    return GitOperations(config)


@pytest.fixture
def probe(config, git_ops):
    return RemoteStatusProbe(git_ops, ignored_paths=[config.session_marker])


@pytest.fixture
def registry(config, git_ops):
    return ProjectRegistry(config, git_ops)


@pytest.fixture
def registered_project(registry, project):
    """The `myproj` project, already in the registry."""
    registry.save([project])
    return project


@pytest.fixture
def state(config, registry):
    return StateDetector(config, registry)


@pytest.fixture
def worktree_service(config, git_ops, probe):
    return WorktreeService(config, git_ops, probe)


@pytest.fixture
def location(project):
    """Location starting in the project's main checkout, no cd file."""
    return LocationService(cwd=project.path, cd_file="")


@pytest.fixture
def mock_pr_service():
    """PR service stand-in that reports no PRs."""
    service = Mock()
    service.lookup_many = Mock(return_value={})
    return service
