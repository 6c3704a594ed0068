"""Console logging — tagged, colourised status lines on stderr.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys

# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------


def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

RESET = "\033[0m" if _COLOR else ""
BOLD = "\033[1m" if _COLOR else ""
DIM = "\033[2m" if _COLOR else ""
RED = "\033[31m" if _COLOR else ""
GREEN = "\033[32m" if _COLOR else ""
YELLOW = "\033[33m" if _COLOR else ""
CYAN = "\033[36m" if _COLOR else ""
GREY = "\033[90m" if _COLOR else ""
ORANGE = "\033[38;5;214m" if _COLOR else ""

_TAG = f"{ORANGE}[tabby]{RESET}"


def _emit(level: str, color: str, msg: str) -> None:
    print(f"{_TAG} {color}{level:<5}{RESET} {msg}", file=sys.stderr)


def info(msg: str) -> None:
    _emit("INFO", CYAN, msg)


def warn(msg: str) -> None:
    _emit("WARN", YELLOW, msg)


def error(msg: str) -> None:
    _emit("ERROR", RED, msg)


def debug(msg: str) -> None:
    _emit("DEBUG", GREY, msg)


def muted(text: object) -> str:
    """Wrap *text* in the dim grey used for paths."""
    return f"{GREY}{text}{RESET}"


def format_duration(ms: float) -> str:
    """``850ms`` below one second, ``1.25s`` above."""
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"
