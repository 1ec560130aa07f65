"""Pull request and build status models"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional


class PRState(Enum):
    """State of a pull request."""
    OPEN = "OPEN"
    MERGED = "MERGED"
    CLOSED = "CLOSED"


class BuildStatus(Enum):
    """Aggregated classification of a pull request's checks."""
    NONE = "none"
    PASSING = "passing"
    FAILING = "failing"
    PENDING = "pending"
    UNKNOWN = "unknown"


class CheckState(Enum):
    """Normalized state of a single check run or commit status."""
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    ERROR = "ERROR"
    PENDING = "PENDING"
    OTHER = "OTHER"


class LookupOutcome(Enum):
    """How a PR lookup ended."""
    FOUND = "found"
    NO_PR = "no_pr"
    FAILED = "failed"


def derive_build_status(total: int, passed: int, failed: int, pending: int) -> BuildStatus:
    """Classify check counts. First matching rule wins."""
    if total == 0:
        return BuildStatus.NONE
    if failed > 0:
        return BuildStatus.FAILING
    if pending > 0:
        return BuildStatus.PENDING
    if passed == total:
        return BuildStatus.PASSING
    return BuildStatus.UNKNOWN


@dataclass(frozen=True)
class PRStatus:
    """Pull request found for a branch, with its aggregated check counts."""
    number: int
    url: str
    state: PRState
    checks_total: int = 0
    checks_passed: int = 0
    checks_failed: int = 0
    checks_pending: int = 0

    @property
    def build_status(self) -> BuildStatus:
        return derive_build_status(
            self.checks_total, self.checks_passed, self.checks_failed, self.checks_pending
        )


@dataclass(frozen=True)
class PRLookup:
    """Result of querying the hosting API for one branch."""
    outcome: LookupOutcome
    status: Optional[PRStatus] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, status: PRStatus) -> "PRLookup":
        return cls(LookupOutcome.FOUND, status=status)

    @classmethod
    def no_pr(cls) -> "PRLookup":
        return cls(LookupOutcome.NO_PR)

    @classmethod
    def failed(cls, error: str) -> "PRLookup":
        return cls(LookupOutcome.FAILED, error=error)
