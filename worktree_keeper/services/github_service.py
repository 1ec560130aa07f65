"""GitHub API integration service"""

import os
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Auth, Github

from worktree_keeper.exceptions import PRLookupFailedError
from worktree_keeper.logging_config import get_logger
from worktree_keeper.models.pr import CheckState, PRLookup, PRState, PRStatus
from worktree_keeper.services.git.operations import GitOperations
from worktree_keeper.utils.threading import get_optimal_worker_count

if TYPE_CHECKING:
    from github.Repository import Repository
    from worktree_keeper.config import Config

logger = get_logger(__name__)

_CONCLUSIONS = {
    "success": CheckState.SUCCESS,
    "neutral": CheckState.SUCCESS,
    "skipped": CheckState.SUCCESS,
    "failure": CheckState.FAILURE,
    "timed_out": CheckState.FAILURE,
    "action_required": CheckState.FAILURE,
    "startup_failure": CheckState.ERROR,
    "cancelled": CheckState.ERROR,
}

_COMMIT_STATES = {
    "success": CheckState.SUCCESS,
    "failure": CheckState.FAILURE,
    "error": CheckState.ERROR,
    "pending": CheckState.PENDING,
}


def parse_github_slug(remote_url: Optional[str]) -> Optional[str]:
    """Extract "owner/repo" from a GitHub remote URL, None for other hosts."""
    if not remote_url or "github.com" not in remote_url:
        return None

    if remote_url.startswith("git@"):
        # Handle SSH URL format (git@github.com:org/repo.git)
        path = remote_url.split("github.com:", 1)[-1]
    else:
        # Handle HTTPS and ssh:// URL formats
        parsed_url = urlparse(remote_url)
        path = parsed_url.path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]

    if path.count("/") != 1:
        return None
    return path


def normalize_check_run(status: Optional[str], conclusion: Optional[str]) -> CheckState:
    """Map a check run's status/conclusion pair onto a CheckState."""
    if status != "completed":
        return CheckState.PENDING
    return _CONCLUSIONS.get((conclusion or "").lower(), CheckState.OTHER)


def normalize_commit_status(state: Optional[str]) -> CheckState:
    """Map a legacy commit status state onto a CheckState."""
    return _COMMIT_STATES.get((state or "").lower(), CheckState.OTHER)


def summarize_checks(states: Iterable[CheckState]) -> Tuple[int, int, int, int]:
    """Count (total, passed, failed, pending) check results."""
    states = list(states)
    passed = sum(1 for s in states if s == CheckState.SUCCESS)
    failed = sum(1 for s in states if s in (CheckState.FAILURE, CheckState.ERROR))
    pending = sum(1 for s in states if s == CheckState.PENDING)
    return len(states), passed, failed, pending


class PRStatusService:
    """Looks up the pull request and check status behind a branch.

    Lookups never raise: errors become ``PRLookup.failed`` and are only
    logged, so one bad request cannot break a listing.
    """

    def __init__(self, config: Union["Config", dict], git_ops: GitOperations):
        self.config = config
        self.git_ops = git_ops
        self.debug_mode = config.get("debug", False)
        self.github_token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        self.api_timeout = config.get("api_timeout", 15.0)
        self.workers = config.get("workers")
        self.github: Optional[Github] = None
        # repo_path -> (slug, Repository) or (None, error message)
        self._repos: Dict[str, Tuple[Optional[str], Union["Repository", str, None]]] = {}
        self._lock = Lock()

    def _client(self) -> Github:
        if self.github is None:
            assert self.github_token is not None
            self.github = Github(
                auth=Auth.Token(self.github_token),
                timeout=max(1, int(self.api_timeout)),
            )
        return self.github

    def _get_gh_repo(self, repo_path: str) -> Tuple[str, "Repository"]:
        """Resolve the GitHub repository behind a local checkout, once per path.

        Raises:
            PRLookupFailedError: no token, not a GitHub remote, or API failure
        """
        with self._lock:
            if repo_path not in self._repos:
                self._repos[repo_path] = self._setup_repo(repo_path)
            slug, repo_or_error = self._repos[repo_path]

        if slug is None:
            raise PRLookupFailedError("setup", str(repo_or_error))
        return slug, repo_or_error

    def _setup_repo(self, repo_path: str):
        if not self.github_token:
            return None, "No GitHub token (set GITHUB_TOKEN)"

        remote_url = self.git_ops.remote_url(repo_path)
        slug = parse_github_slug(remote_url)
        if slug is None:
            return None, f"Not a GitHub remote: {remote_url}"

        try:
            gh_repo = self._client().get_repo(slug)
        except Exception as e:
            return None, f"Failed to open {slug}: {e}"

        logger.debug(f"[GitHub] GitHub integration enabled for: {slug}")
        return slug, gh_repo

    def _collect_checks(self, gh_repo: "Repository", sha: str) -> List[CheckState]:
        """Check runs plus legacy commit statuses for a commit."""
        commit = gh_repo.get_commit(sha)
        states = [
            normalize_check_run(run.status, run.conclusion)
            for run in commit.get_check_runs()
        ]
        states.extend(
            normalize_commit_status(status.state)
            for status in commit.get_combined_status().statuses
        )
        return states

    def fetch(self, branch: str, repo_path: str) -> PRLookup:
        """Most recent pull request (any state) whose head is branch."""
        try:
            slug, gh_repo = self._get_gh_repo(repo_path)
            owner = slug.split("/")[0]

            pulls = gh_repo.get_pulls(
                state="all", head=f"{owner}:{branch}", sort="created", direction="desc"
            )
            pr = next(iter(pulls), None)
            if pr is None:
                return PRLookup.no_pr()

            if pr.merged_at is not None:
                state = PRState.MERGED
            elif pr.state == "closed":
                state = PRState.CLOSED
            else:
                state = PRState.OPEN

            total, passed, failed, pending = summarize_checks(
                self._collect_checks(gh_repo, pr.head.sha)
            )
            status = PRStatus(
                number=pr.number,
                url=pr.html_url,
                state=state,
                checks_total=total,
                checks_passed=passed,
                checks_failed=failed,
                checks_pending=pending,
            )
            if self.debug_mode:
                logger.debug(
                    f"[GitHub] {branch}: #{status.number} {state.value} "
                    f"{status.build_status.value} {passed}/{total}"
                )
            return PRLookup.found(status)
        except PRLookupFailedError as e:
            logger.debug(f"[GitHub] {e}")
            return PRLookup.failed(str(e))
        except Exception as e:
            logger.debug(f"[GitHub] Error getting PR status for {branch}: {e}")
            return PRLookup.failed(str(e))

    def lookup(self, branch: str, repo_path: str) -> Optional[PRStatus]:
        """PR status for branch, or None when there is none or the query failed."""
        return self.fetch(branch, repo_path).status

    def lookup_many(self, branches: List[str], repo_path: str) -> Dict[str, PRLookup]:
        """Fetch PR data for many branches in parallel; returns once all finish."""
        if not branches:
            return {}

        max_workers = get_optimal_worker_count(self.workers, tasks=len(branches))
        logger.debug(
            f"[GitHub] Fetching PR data for {len(branches)} branches using {max_workers} workers"
        )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                branch: executor.submit(self.fetch, branch, repo_path)
                for branch in branches
            }

        result = {}
        for branch, future in futures.items():
            try:
                result[branch] = future.result()
            except Exception as e:
                result[branch] = PRLookup.failed(str(e))
        return result

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
