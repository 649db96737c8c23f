"""Color & style helpers.

ANSI escape codes are emitted only when the Styler is enabled. Whether it
is enabled comes from Settings.color: True or False forces it, None follows
whether the output stream is a TTY.
"""

from typing import Optional, TextIO

RESET = "0"
BOLD = "1"
DIM = "2"

RED = "91"
GREEN = "92"
YELLOW = "93"
BLUE = "94"
CYAN = "96"
WHITE = "97"
GREY = "90"


def colors_enabled(preference: Optional[bool], stream: TextIO) -> bool:
    """Decide whether to color output written to ``stream``."""
    if preference is not None:
        return preference
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Styler:
    """Wraps text in ANSI styles when enabled, returns it unchanged otherwise."""

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def __call__(self, text: str, *styles: str) -> str:
        """Wrap ``text`` in the given SGR codes.

        Args:
            text: Text to style
            styles: SGR parameters such as GREEN or BOLD

        Returns:
            Styled text, or ``text`` unchanged when disabled or no styles are given
        """
        if not self.enabled or not styles:
            return text
        return f"\033[{';'.join(styles)}m{text}\033[{RESET}m"

    # Named styles used by the CLI
    def header(self, text: str) -> str:
        """Bold cyan, for titles and greetings."""
        return self(text, CYAN, BOLD)

    def heading(self, text: str) -> str:
        """Bold white, for section headings in the usage text."""
        return self(text, WHITE, BOLD)

    def muted(self, text: str) -> str:
        """Grey, for secondary details such as dates and totals."""
        return self(text, GREY)

    def success(self, text: str) -> str:
        """Green, for completed tasks and confirmations."""
        return self(text, GREEN)

    def warning(self, text: str) -> str:
        """Yellow, for empty lists, deletions and pending counts."""
        return self(text, YELLOW)

    def error(self, text: str) -> str:
        """Red, for error messages."""
        return self(text, RED)

    def command(self, text: str) -> str:
        """Bold green, for command names in the usage text."""
        return self(text, GREEN, BOLD)

    def example(self, text: str) -> str:
        """Blue, for example invocations."""
        return self(text, BLUE)
