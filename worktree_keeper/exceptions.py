"""Custom exceptions for worktree-keeper"""

from typing import Optional


class WorkError(Exception):
    """Base exception for all worktree-keeper errors."""
    pass


class ConfigError(WorkError, ValueError):
    """Exception raised for invalid configuration values."""
    pass


class NotAGitRepositoryError(WorkError):
    """Exception raised when a path is not inside a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class AlreadyRegisteredError(WorkError):
    """Exception raised when a project name or path is already registered."""

    def __init__(self, name: str, path: str, field: str = "name"):
        self.name = name
        self.path = path
        self.field = field

        if field == "path":
            message = f"Path already registered: {path}"
        else:
            message = f"Project '{name}' already registered"
        super().__init__(message)


class NotRegisteredProjectError(WorkError):
    """Exception raised when a command needs a current project and none is detected."""

    def __init__(self, cwd: Optional[str] = None):
        self.cwd = cwd
        super().__init__("Not in a registered project")


class RegistryCorruptError(WorkError):
    """Exception raised when the project registry file cannot be parsed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Project registry {path} is unreadable"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)


class GitOperationError(WorkError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeNotFoundError(GitOperationError):
    """Exception raised when a worktree directory does not exist."""

    def __init__(self, branch: str):
        super().__init__("find_worktree", branch, "Worktree not found")

    def __str__(self) -> str:
        return f"Worktree '{self.branch}' not found"


class FetchFailedError(GitOperationError):
    """Exception raised when fetching the upstream default branch fails."""

    def __init__(self, ref: str, message: Optional[str] = None):
        self.ref = ref
        super().__init__("fetch", message=message or f"Failed to fetch {ref}")


class WorktreeCreateError(GitOperationError):
    """Exception raised when git refuses to create a worktree."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("worktree_add", branch, message or "Failed to create worktree")


class RemoteQueryFailedError(GitOperationError):
    """Exception raised when a remote ref query fails or times out.

    Never surfaces to the user: callers turn it into a negative result.
    """

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("ls_remote", branch, message)


class PRLookupFailedError(WorkError):
    """Exception raised for errors in GitHub API operations.

    Never surfaces to the user: PR lookups degrade to "no PR".
    """

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class UsageError(WorkError):
    """Exception raised when a command is missing a required argument."""
    pass
