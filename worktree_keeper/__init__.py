"""
worktree-keeper - Multi-project git worktree manager with PR and build status
"""

from .__version__ import __version__
from .cli.main import main

__all__ = ["main", "__version__"]
