"""Tracks where the caller should end up once the command finishes.

A child process cannot change its parent shell's directory. The process
changes its own directory (so nothing it deletes is its cwd), and the final
target is handed to the shell wrapper through the file named by
``WORK_CD_FILE``.
"""
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

CD_FILE_ENV = "WORK_CD_FILE"


class LocationService:
    """Owns the process working directory and the pending shell cd."""

    def __init__(self, cwd: Optional[str] = None, cd_file: Optional[str] = None, mise_trust: bool = False):
        self._cwd = os.path.realpath(cwd or os.getcwd())
        self.cd_file = cd_file if cd_file is not None else os.environ.get(CD_FILE_ENV)
        self.mise_trust = mise_trust
        self.target: Optional[str] = None

    @property
    def cwd(self) -> str:
        return self._cwd

    def relocate(self, path: str) -> None:
        """Move the process (and, later, the caller's shell) to path."""
        path = os.path.realpath(path)
        os.chdir(path)
        self._cwd = path
        self.target = path
        logger.debug(f"Relocated to {path}")

    def finish(self) -> Optional[str]:
        """Hand the pending directory change to the shell wrapper.

        Returns the target path, or None when no relocation happened.
        """
        if self.target is None:
            return None

        if self.mise_trust:
            self._trust_mise(self.target)

        if self.cd_file:
            Path(self.cd_file).write_text(self.target)
            logger.debug(f"Wrote {self.target} to {self.cd_file}")
        return self.target

    @staticmethod
    def _trust_mise(path: str) -> None:
        """Best-effort `mise trust` so the destination's tool config loads."""
        mise = shutil.which("mise")
        if not mise:
            return
        try:
            subprocess.run(
                [mise, "trust", "--quiet"],
                cwd=path,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=10,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"mise trust failed in {path}: {e}")
