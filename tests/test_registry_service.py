"""Tests for ProjectRegistry"""
import json

import git
import pytest

from worktree_keeper.exceptions import (
    AlreadyRegisteredError,
    NotAGitRepositoryError,
    RegistryCorruptError,
)
from worktree_keeper.models.project import Project


class TestRegistryLoadSave:
    """Test reading and writing the registry file."""

    def test_missing_file_is_empty(self, registry):
        assert registry.load() == []

    def test_save_then_load_keeps_order(self, registry):
        projects = [Project("b", "/src/b"), Project("a", "/src/a")]
        registry.save(projects)

        assert registry.load() == projects

    def test_save_writes_json_list(self, registry, config):
        registry.save([Project("a", "/src/a")])

        data = json.loads(config.projects_file.read_text())
        assert data == [{"name": "a", "path": "/src/a"}]

    def test_save_leaves_no_temp_files(self, registry, config):
        registry.save([Project("a", "/src/a")])

        assert [p.name for p in config.config_dir.iterdir()] == ["projects.json"]

    def test_corrupt_file_raises(self, registry, config):
        config.config_dir.mkdir(parents=True)
        config.projects_file.write_text("{oops")

        with pytest.raises(RegistryCorruptError):
            registry.load()

    def test_non_list_raises(self, registry, config):
        config.config_dir.mkdir(parents=True)
        config.projects_file.write_text('{"name": "a"}')

        with pytest.raises(RegistryCorruptError, match="list"):
            registry.load()

    def test_malformed_entries_are_skipped(self, registry, config):
        config.config_dir.mkdir(parents=True)
        config.projects_file.write_text(
            json.dumps([{"name": "a", "path": "/src/a"}, {"name": "b"}, "junk"])
        )

        assert registry.load() == [Project("a", "/src/a")]

    def test_get(self, registry):
        registry.save([Project("a", "/src/a")])

        assert registry.get("a") == Project("a", "/src/a")
        assert registry.get("missing") is None


class TestRegistryAdd:
    """Test registering repositories."""

    def test_add_repo_root(self, registry, git_repo):
        project = registry.add(git_repo.working_tree_dir)

        assert project == Project("myproj", git_repo.working_tree_dir)
        assert registry.load() == [project]

    def test_add_from_subdirectory_registers_root(self, registry, git_repo, temp_dir):
        subdir = temp_dir / "myproj" / "src"
        subdir.mkdir()

        project = registry.add(str(subdir))

        assert project.path == git_repo.working_tree_dir

    def test_add_not_a_repo(self, registry, temp_dir):
        plain = temp_dir / "plain"
        plain.mkdir()

        with pytest.raises(NotAGitRepositoryError):
            registry.add(str(plain))

    def test_add_same_path_twice(self, registry, git_repo):
        registry.add(git_repo.working_tree_dir)

        with pytest.raises(AlreadyRegisteredError):
            registry.add(git_repo.working_tree_dir)
        assert len(registry.load()) == 1

    def test_add_same_name_different_path(self, registry, git_repo, origin_repo, temp_dir):
        registry.add(git_repo.working_tree_dir)
        other = git.Repo.clone_from(origin_repo.git_dir, str(temp_dir / "elsewhere" / "myproj"))
        other.close()

        with pytest.raises(AlreadyRegisteredError) as exc_info:
            registry.add(str(temp_dir / "elsewhere" / "myproj"))

        assert exc_info.value.field == "name"
        assert len(registry.load()) == 1

    def test_registered_path_under_another_name(self, registry, git_repo):
        registry.save([Project("alias", git_repo.working_tree_dir)])

        with pytest.raises(AlreadyRegisteredError) as exc_info:
            registry.add(git_repo.working_tree_dir)

        assert exc_info.value.field == "path"
