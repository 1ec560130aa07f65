"""Command-line argument parsing for worktree-keeper."""

import argparse

from worktree_keeper.__version__ import __version__

COMMANDS = ("ls", "rm", "prune", "add")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="work",
        description="Manage git worktrees across registered projects",
        epilog="Commands: ls | rm [branch] | prune | add [path] | <branch>. "
        "Without a command an interactive picker opens. "
        "Set GITHUB_TOKEN to show pull request and build status. "
        "Shell setup: eval \"$(work-keeper --shell-init bash)\"",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help="ls, rm, prune, add, or a branch name to create/open",
    )
    parser.add_argument(
        "argument",
        nargs="?",
        help="Branch for rm, path for add",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"worktree-keeper {__version__}")
    parser.add_argument(
        "--shell-init",
        choices=["bash", "zsh"],
        metavar="SHELL",
        help="Print the `work` shell function for bash or zsh and exit",
    )
    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
