"""Natural, case-insensitive text ordering for task content."""

import re
import unicodedata

_CHUNK_PATTERN = re.compile(r"(\d+)")


def _fold(text: str) -> str:
    """Strip accents and case so that "Éclair" and "eclair" compare equal."""
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    return text.casefold()


def natural_key(text: str) -> tuple[tuple[int, int | str], ...]:
    """
    Sort key comparing digit runs numerically and the rest case-insensitively.

    Example: "Task 2" < "task 10"
    """
    chunks = _CHUNK_PATTERN.split(_fold(text))
    key: list[tuple[int, int | str]] = []
    for chunk in chunks:
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk)))
        else:
            key.append((1, chunk))
    return tuple(key)


def compare_text(a: str, b: str) -> int:
    """Three-way comparison of two strings using natural_key."""
    key_a = natural_key(a)
    key_b = natural_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0
