"""Git operations service"""

import subprocess
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

import git

from worktree_keeper.exceptions import GitOperationError
from worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_keeper.config import Config

logger = get_logger(__name__)


def describe_git_error(e: Exception, command: str) -> str:
    """Build a one-line description of a failed git command."""
    if isinstance(e, git.exc.GitCommandError):
        stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else "").strip()
        # GitPython prefixes stderr with "stderr: '...'"
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:"):].strip().strip("'").strip()
        status = e.status if hasattr(e, "status") else "unknown"
        if stderr:
            return f"git {command} failed (exit {status}): {stderr}"
        return f"git {command} failed with exit code {status}"
    return f"Unexpected error running git {command}: {e}"


class GitOperations:
    """Thin wrapper around the git primitives worktree-keeper needs.

    Every method takes the repository or worktree path it acts on, so one
    instance serves all registered projects. A fresh ``git.Repo`` / ``git.Git``
    is created per call, which keeps the class safe to share across the PR
    lookup threads.
    """

    def __init__(self, config: Union["Config", dict]):
        self.config = config
        self.remote_name = config.get("remote_name", "origin")
        self.remote_timeout = config.get("remote_timeout", 10.0)

    def _get_repo(self, repo_path: str) -> git.Repo:
        """Get a git.Repo instance for the repository at repo_path."""
        return git.Repo(repo_path)

    @staticmethod
    def _git(path: str) -> git.Git:
        """Command runner bound to a working directory (repo or worktree)."""
        return git.Git(path)

    # ------------------------------------------------------------------
    # Repository discovery
    # ------------------------------------------------------------------

    def find_repo_root(self, path: str) -> Optional[str]:
        """Return the top-level directory of the repository containing path."""
        try:
            repo = git.Repo(path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            return None
        try:
            return repo.working_tree_dir
        finally:
            repo.close()

    def remote_url(self, repo_path: str) -> Optional[str]:
        """URL of the configured remote, or None when there is none."""
        try:
            repo = self._get_repo(repo_path)
            return repo.remote(self.remote_name).url
        except (ValueError, git.exc.GitError) as e:
            logger.debug(f"No remote '{self.remote_name}' in {repo_path}: {e}")
            return None

    # ------------------------------------------------------------------
    # Fetching and remote queries
    # ------------------------------------------------------------------

    def fetch_ref(self, repo_path: str, ref: str) -> None:
        """Fetch a single ref from the remote into repo_path.

        Raises:
            GitOperationError: if the fetch fails
        """
        try:
            self._git(repo_path).fetch(self.remote_name, ref)
            logger.info(f"Fetched {self.remote_name}/{ref} into {repo_path}")
        except git.exc.GitCommandError as e:
            raise GitOperationError("fetch", ref, describe_git_error(e, "fetch"))

    def fetch_prune(self, repo_path: str) -> Tuple[bool, Optional[str]]:
        """Fetch the remote with --prune.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._git(repo_path).fetch(self.remote_name, "--prune")
            logger.info(f"Fetched {self.remote_name} --prune in {repo_path}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "fetch --prune")
            logger.warning(f"Failed to fetch {repo_path}: {error_msg}")
            return False, error_msg

    def ls_remote_heads(self, repo_path: str, branch: str) -> List[str]:
        """List remote head refs exactly matching refs/heads/<branch>.

        Raises:
            git.exc.GitCommandError: on query failure or timeout
        """
        output = self._git(repo_path).ls_remote(
            "--heads",
            self.remote_name,
            f"refs/heads/{branch}",
            kill_after_timeout=self.remote_timeout,
        )
        return [line for line in output.splitlines() if line.strip()]

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def local_branch_exists(self, repo_path: str, branch: str) -> bool:
        """Check whether refs/heads/<branch> exists in repo_path."""
        try:
            self._git(repo_path).rev_parse("--verify", "--quiet", f"refs/heads/{branch}")
            return True
        except git.exc.GitCommandError:
            return False

    def delete_branch(self, repo_path: str, branch: str) -> Tuple[bool, Optional[str]]:
        """Force-delete a local branch.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._git(repo_path).branch("-D", branch)
            logger.info(f"Deleted branch {branch} in {repo_path}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "branch -D")
            logger.debug(f"Could not delete branch {branch}: {error_msg}")
            return False, error_msg

    def current_branch(self, worktree_path: str) -> Optional[str]:
        """Branch checked out in worktree_path, None when detached."""
        try:
            name = self._git(worktree_path).rev_parse("--abbrev-ref", "HEAD").strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not read HEAD in {worktree_path}: {e}")
            return None
        return None if name == "HEAD" else name

    def has_configured_upstream(self, worktree_path: str, branch: str) -> bool:
        """Whether branch.<branch>.merge is set, even if the ref it names is gone."""
        try:
            self._git(worktree_path).config("--get", f"branch.{branch}.merge")
            return True
        except git.exc.GitCommandError:
            return False

    def resolve_upstream(self, worktree_path: str) -> Optional[str]:
        """Short name of HEAD's upstream ref, None when it does not resolve."""
        try:
            upstream = self._git(worktree_path).rev_parse(
                "--abbrev-ref", "--symbolic-full-name", "@{upstream}"
            )
            return upstream.strip() or None
        except git.exc.GitCommandError:
            return None

    def commits_not_in(self, worktree_path: str, upstream: str) -> List[str]:
        """Commits on HEAD that are missing from upstream."""
        output = self._git(worktree_path).rev_list(f"{upstream}..HEAD")
        return [line for line in output.splitlines() if line.strip()]

    def commits_not_on_remote(self, worktree_path: str) -> List[str]:
        """Commits on HEAD that no remote-tracking ref of the remote contains."""
        output = self._git(worktree_path).rev_list(
            "HEAD", "--not", f"--remotes={self.remote_name}"
        )
        return [line for line in output.splitlines() if line.strip()]

    def status_porcelain(self, worktree_path: str) -> str:
        """Output of `git status --porcelain`, untracked files listed one by one."""
        return self._git(worktree_path).status("--porcelain", "--untracked-files=all")

    # ------------------------------------------------------------------
    # Worktrees
    # ------------------------------------------------------------------

    def add_worktree(
        self,
        repo_path: str,
        worktree_path: str,
        branch: str,
        start_point: Optional[str] = None,
    ) -> None:
        """Register a worktree without checking files out.

        With ``start_point`` a new branch is created from it; otherwise the
        existing local branch is used.

        Raises:
            GitOperationError: if git refuses
        """
        args = ["add", "--no-checkout"]
        if start_point:
            args += ["-b", branch, worktree_path, start_point]
        else:
            args += [worktree_path, branch]
        try:
            self._git(repo_path).worktree(*args)
            logger.info(f"Added worktree {worktree_path} for {branch}")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree_add", branch, describe_git_error(e, "worktree add"))

    def checkout_head(self, worktree_path: str, background: bool = False) -> None:
        """Materialize the files of a --no-checkout worktree.

        In background mode a detached process is started and not waited on.
        """
        if background:
            # GitPython's as_process handle kills the child when collected,
            # so the detached case goes through subprocess directly.
            subprocess.Popen(
                ["git", "-C", worktree_path, "checkout", "HEAD"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
            logger.debug(f"Started background checkout in {worktree_path}")
            return
        try:
            self._git(worktree_path).checkout("HEAD")
        except git.exc.GitCommandError as e:
            raise GitOperationError("checkout", message=describe_git_error(e, "checkout"))

    def remove_worktree(self, repo_path: str, path: str, force: bool = False) -> Tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            repo_path: Main repository the worktree belongs to
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            args = ["remove", path]
            if force:
                args.append("--force")

            self._git(repo_path).worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree remove")
            logger.debug(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

    def prune_worktrees(self, repo_path: str) -> Tuple[bool, Optional[str]]:
        """Prune worktree metadata whose directory is gone.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._git(repo_path).worktree("prune")
            return True, None
        except git.exc.GitCommandError as e:
            error_msg = describe_git_error(e, "worktree prune")
            logger.debug(f"Failed to prune worktrees in {repo_path}: {error_msg}")
            return False, error_msg
