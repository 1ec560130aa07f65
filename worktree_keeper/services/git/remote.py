"""Remote and local change probes used before deleting a worktree."""

from typing import Iterable, List, Optional

import git

from worktree_keeper.exceptions import RemoteQueryFailedError
from worktree_keeper.logging_config import get_logger
from worktree_keeper.services.git.operations import GitOperations, describe_git_error

logger = get_logger(__name__)


class RemoteStatusProbe:
    """Answers "is it on the remote?" and "is there unsaved work?"."""

    def __init__(self, git_ops: GitOperations, ignored_paths: Optional[Iterable[str]] = None):
        self.git_ops = git_ops
        # Files the tool itself writes into worktrees
        self.ignored_paths = set(ignored_paths or ())

    def query_remote_branch(self, branch: str, repo_path: str) -> bool:
        """Strict variant of branch_exists_on_remote.

        Raises:
            RemoteQueryFailedError: when ls-remote fails or times out
        """
        try:
            return bool(self.git_ops.ls_remote_heads(repo_path, branch))
        except (git.exc.GitError, OSError) as e:
            raise RemoteQueryFailedError(branch, describe_git_error(e, "ls-remote"))

    def branch_exists_on_remote(self, branch: str, repo_path: str) -> bool:
        """True iff the remote has refs/heads/<branch>.

        A failed or timed-out query counts as "not found".
        """
        try:
            return self.query_remote_branch(branch, repo_path)
        except RemoteQueryFailedError as e:
            logger.debug(f"{e}; treating '{branch}' as absent from remote")
            return False

    def has_local_changes(self, worktree_path: str) -> bool:
        """True when the worktree holds anything not safely on the remote.

        That is: uncommitted or untracked files, or commits missing from the
        branch's upstream. A branch without an upstream counts as unpushed.
        When the upstream is configured but its ref was pruned, commits are
        compared against every remote-tracking ref instead.
        """
        try:
            if self._dirty_paths(worktree_path):
                logger.debug(f"{worktree_path} has uncommitted changes")
                return True

            branch = self.git_ops.current_branch(worktree_path)
            if branch is None:
                # Detached HEAD: only safe if every commit is on the remote
                return bool(self.git_ops.commits_not_on_remote(worktree_path))

            upstream = self.git_ops.resolve_upstream(worktree_path)
            if upstream is not None:
                unpushed = self.git_ops.commits_not_in(worktree_path, upstream)
            elif self.git_ops.has_configured_upstream(worktree_path, branch):
                unpushed = self.git_ops.commits_not_on_remote(worktree_path)
            else:
                logger.debug(f"{branch} has no upstream; treating as unpushed")
                return True

            if unpushed:
                logger.debug(f"{branch} has {len(unpushed)} unpushed commit(s)")
            return bool(unpushed)
        except (git.exc.GitError, OSError) as e:
            logger.debug(
                f"Could not inspect {worktree_path}: {describe_git_error(e, 'status')}; keeping it"
            )
            return True

    def _dirty_paths(self, worktree_path: str) -> List[str]:
        """Changed or untracked paths, minus the ones this tool writes."""
        paths = []
        for line in self.git_ops.status_porcelain(worktree_path).splitlines():
            if len(line) < 4:
                continue
            path = line[3:].split(" -> ")[-1].strip('"')
            if path not in self.ignored_paths:
                paths.append(path)
        return paths
