"""PR and build status formatting utilities."""

import os
from pathlib import Path

from worktree_keeper.constants import BUILD_COLORS, BUILD_ICONS, PR_STATE_STYLES
from worktree_keeper.models.pr import BuildStatus, PRState, PRStatus


def format_pr_state(state: PRState) -> str:
    """
    Format PR state with Rich markup.

    Args:
        state: PR state

    Returns:
        Rich-formatted state string
    """
    label, color = PR_STATE_STYLES.get(state, (state.value.lower(), None))
    if color:
        return f"[{color}]{label}[/{color}]"
    return label


def format_build_icon(build_status: BuildStatus) -> str:
    """Colored icon for a build status, empty for none/unknown."""
    icon = BUILD_ICONS.get(build_status, "")
    if not icon:
        return ""
    color = BUILD_COLORS[build_status]
    return f"[{color}]{icon}[/{color}]"


def format_pr_summary(status: PRStatus) -> str:
    """
    Rich-formatted PR column for `ls`.

    Example: "#42 open ✓ 3/3 https://github.com/org/repo/pull/42"
    """
    parts = [f"[cyan]#{status.number}[/cyan]", format_pr_state(status.state)]
    if status.checks_total > 0:
        color = BUILD_COLORS.get(status.build_status, "bright_black")
        build = f"[{color}]{status.checks_passed}/{status.checks_total}[/{color}]"
        icon = format_build_icon(status.build_status)
        parts.append(f"{icon} {build}" if icon else build)
    parts.append(f"[bright_black]{status.url}[/bright_black]")
    return " ".join(parts)


def format_pr_plain(status: PRStatus) -> str:
    """
    Plain-text PR summary for picker labels.

    Example: "#42 OPEN passing 3/3"
    """
    text = f"#{status.number} {status.state.value}"
    if status.checks_total > 0:
        text += f" {status.build_status.value} {status.checks_passed}/{status.checks_total}"
    return text


def format_worktree_count(count: int) -> str:
    """'no worktrees', '1 worktree' or 'N worktrees'."""
    if count == 0:
        return "no worktrees"
    if count == 1:
        return "1 worktree"
    return f"{count} worktrees"


def shorten_home(path: str) -> str:
    """Replace the home directory prefix with '~'."""
    home = str(Path.home())
    if path == home:
        return "~"
    if path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path
