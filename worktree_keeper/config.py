"""Configuration handling for worktree-keeper"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from worktree_keeper.exceptions import ConfigError

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "work"
DEFAULT_WORKTREES_ROOT = Path.home() / "workspace" / "worktrees"
CONFIG_FILE_NAME = "config.json"
PROJECTS_FILE_NAME = "projects.json"

# Environment variable -> config field
ENV_OVERRIDES = {
    "WORK_CONFIG_DIR": "config_dir",
    "WORK_WORKTREES_DIR": "worktrees_root",
    "WORK_MAIN_BRANCH": "main_branch",
    "GITHUB_TOKEN": "github_token",
}


@dataclass
class Config:
    """Configuration for worktree-keeper with validation."""

    # Storage locations
    config_dir: Path = field(default_factory=lambda: DEFAULT_CONFIG_DIR)
    worktrees_root: Path = field(default_factory=lambda: DEFAULT_WORKTREES_ROOT)

    # Git
    remote_name: str = "origin"
    main_branch: str = "main"
    background_checkout: bool = False  # Detach the file checkout after `worktree add`
    session_marker: str = ".claude/settings.local.json"

    # GitHub integration
    github_token: Optional[str] = None

    # Bounded waits for network calls, in seconds
    remote_timeout: float = 10.0
    api_timeout: float = 15.0

    # Parallel PR lookups (None = auto-detect)
    workers: Optional[int] = None

    # Run `mise trust` in the destination after changing directory
    mise_trust: bool = True

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.config_dir = self._validate_path("config_dir", self.config_dir)
        self.worktrees_root = self._validate_path("worktrees_root", self.worktrees_root)
        self._validate_names()
        self._validate_timeouts()
        self._validate_workers()
        self._validate_session_marker()

    @staticmethod
    def _validate_path(name: str, value: Any) -> Path:
        """Expand `~` and make the path absolute."""
        if value is None or not str(value).strip():
            raise ConfigError(f"{name} cannot be empty")
        return Path(os.path.abspath(os.path.expanduser(str(value))))

    def _validate_names(self):
        """Validate remote_name and main_branch are not empty."""
        for name in ("remote_name", "main_branch"):
            value = getattr(self, name)
            if not value or not str(value).strip():
                raise ConfigError(f"{name} cannot be empty")
            setattr(self, name, str(value).strip())

    def _validate_timeouts(self):
        """Validate timeouts are positive."""
        for name in ("remote_timeout", "api_timeout"):
            value = getattr(self, name)
            if value is None or value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")

    def _validate_workers(self):
        """Validate workers is positive when given."""
        if self.workers is not None and self.workers <= 0:
            raise ConfigError(f"workers must be positive, got {self.workers}")

    def _validate_session_marker(self):
        """The marker must stay inside the worktree."""
        marker = Path(self.session_marker)
        if marker.is_absolute() or ".." in marker.parts:
            raise ConfigError(f"session_marker must be a relative path, got '{self.session_marker}'")

    @property
    def projects_file(self) -> Path:
        return self.config_dir / PROJECTS_FILE_NAME

    @property
    def log_file(self) -> Path:
        return self.config_dir / "work.log"

    def to_dict(self) -> dict:
        """Convert config to a JSON-friendly dictionary."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Path) else value
        return result

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def load(cls, overrides: Optional[Dict[str, Any]] = None, environ=None) -> "Config":
        """Build a Config from defaults, config.json, environment and overrides.

        Later sources win. ``overrides`` usually carries command-line flags;
        ``None`` values in it are ignored.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        env_values = {
            field_name: env[var]
            for var, field_name in ENV_OVERRIDES.items()
            if env.get(var)
        }

        config_dir = Path(
            os.path.expanduser(env_values.get("config_dir", str(DEFAULT_CONFIG_DIR)))
        )
        values.update(_read_config_file(config_dir / CONFIG_FILE_NAME))
        values.update(env_values)
        if overrides:
            values.update({k: v for k, v in overrides.items() if v is not None})

        return cls.from_dict(values)


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Read an optional JSON config file."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data
