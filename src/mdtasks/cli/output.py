"""Status message helpers for the CLI.

Messages go to stderr so stdout carries only command output.
"""

import sys

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"
CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗


def _supports_color() -> bool:
    """Check if stderr is a terminal that supports color."""
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def _colorize(text: str, color: str) -> str:
    """Apply color to text if the terminal supports it."""
    if _supports_color():
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    """Report a completed action with a green checkmark."""
    print(f"{_colorize(CHECK, GREEN)} {message}", file=sys.stderr)


def info(message: str) -> None:
    """Report a neutral outcome with a yellow bullet."""
    print(f"{_colorize(BULLET, YELLOW)} {message}", file=sys.stderr)


def error(message: str) -> None:
    """Report a failure with a red cross."""
    print(f"{_colorize(CROSS, RED)} {message}", file=sys.stderr)
