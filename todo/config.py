"""Settings for todo-cli loaded from environment variables.

All environment lookups happen here, once, at startup. The resulting
Settings object is passed explicitly to the store, the profile and the
renderer.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_TODO_FILE = ".todos.json"
DEFAULT_USER_FILE = ".todo_user"
DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_path(environ: Mapping[str, str], name: str, default: str) -> Path:
    raw = _env(environ, name)
    if raw is None:
        return Path(default)
    return Path(raw).expanduser()


def _color_preference(environ: Mapping[str, str]) -> Optional[bool]:
    """Resolve NO_COLOR / FORCE_COLOR into on, off or None (decide by TTY)."""
    if _env(environ, "NO_COLOR") is not None:
        return False
    force = _env(environ, "FORCE_COLOR")
    if force is not None and force.lower() in _TRUTHY:
        return True
    return None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes:
        todo_file: Path of the JSON file holding the task list
        user_file: Path of the small file holding the display name
        log_level: Name of the logging level for stderr output
        color: True/False to force color on/off, None to follow the TTY
    """

    todo_file: Path = Path(DEFAULT_TODO_FILE)
    user_file: Path = Path(DEFAULT_USER_FILE)
    log_level: str = DEFAULT_LOG_LEVEL
    color: Optional[bool] = None

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the non-None keyword arguments applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read from. If None, uses os.environ

    Returns:
        Settings with defaults applied for anything unset or blank
    """
    if environ is None:
        environ = os.environ

    return Settings(
        todo_file=_env_path(environ, "TODO_FILE", DEFAULT_TODO_FILE),
        user_file=_env_path(environ, "TODO_USER_FILE", DEFAULT_USER_FILE),
        log_level=(_env(environ, "TODO_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        color=_color_preference(environ),
    )
