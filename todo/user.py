"""Display name shown in the list header.

The name lives in a small side file. On first run it is asked for
interactively and saved for later sessions.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Friend"
PROMPT = "What's your name? "


def read_name(user_file: Path) -> Optional[str]:
    """Return the saved display name, or None if there isn't one."""
    try:
        name = user_file.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError):
        logger.debug("Could not read user file %s", user_file, exc_info=True)
        return None
    return name or None


def save_name(user_file: Path, name: str) -> bool:
    """Save the display name, readable and writable by the owner only.

    Returns:
        True if the name was written, False otherwise
    """
    try:
        user_file.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(user_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(name)
    except OSError:
        logger.warning("Could not save display name to %s", user_file, exc_info=True)
        return False
    return True


def prompt_name(read_line: Callable[[str], str] = input) -> str:
    """Ask for a display name; blank answers and EOF give the default."""
    try:
        name = read_line(PROMPT).strip()
    except EOFError:
        name = ""
    return name or DEFAULT_NAME

