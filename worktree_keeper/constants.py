"""Shared constants for worktree-keeper."""

from worktree_keeper.models.pr import BuildStatus, PRState

# Symbol constants
SYMBOL_CURRENT = "<- current"
MAIN_REPO_LABEL = "main  (main repo)"

BUILD_ICONS = {
    BuildStatus.PASSING: "✓",
    BuildStatus.FAILING: "✗",
    BuildStatus.PENDING: "○",
}

# CLI colors (Rich color names)
BUILD_COLORS = {
    BuildStatus.PASSING: "green",
    BuildStatus.FAILING: "red",
    BuildStatus.PENDING: "yellow",
    BuildStatus.NONE: "bright_black",
    BuildStatus.UNKNOWN: "bright_black",
}

PR_STATE_STYLES = {
    PRState.OPEN: ("open", "green"),
    PRState.MERGED: ("merged", "magenta"),
    PRState.CLOSED: ("closed", "red"),
}

PROJECT_PROMPT = "Select project: "
WORKTREE_PROMPT = "{project} [esc=back]: "
