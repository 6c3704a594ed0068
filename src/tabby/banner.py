"""Startup banner and build summary — mode-aware status output."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from tabby.log import (
    BOLD,
    CYAN,
    DIM,
    GREEN,
    ORANGE,
    RED,
    RESET,
    YELLOW,
    format_duration,
    plural,
)

if TYPE_CHECKING:
    from tabby._types import Campaign
    from tabby.config import TabbyConfig
    from tabby.export.builder import BuildResult


_MODE_STYLES: dict[str, tuple[str, str]] = {
    "dev": (GREEN, "dev"),
    "build": (YELLOW, "build"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (DIM, mode))
    return f"{color}[{label}]{RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not RESET:
        return url
    return f"\033]8;;{url}\033\\{BOLD}{CYAN}{url}{RESET}\033]8;;\033\\"


def print_banner(
    config: TabbyConfig,
    campaigns: list[Campaign],
    mode: str,
    *,
    campaign: Campaign | None = None,
) -> None:
    """Print the Tabby startup banner to stderr.

    Args:
        config: Resolved TabbyConfig.
        campaigns: Campaigns the session works on.
        mode: One of ``"dev"``, ``"build"``.
        campaign: The campaign selected for ``dev``, if any.

    """
    from tabby import __version__

    header = f"  {ORANGE}{BOLD}tabby{RESET} {DIM}v{__version__}{RESET}  {_mode_badge(mode)}"

    lines: list[str] = [
        "",
        header,
        f"  {DIM}{'─' * 43}{RESET}",
        f"  {DIM}├─{RESET} {plural(len(campaigns), 'campaign')} registered",
        f"  {DIM}├─{RESET} source: {DIM}{config.src_path}{RESET}",
    ]

    if mode == "dev":
        lines.append(
            f"  {DIM}├─{RESET} {GREEN}live{RESET} "
            f"— SSE on {DIM}{config.reload_path}{RESET}"
        )
    lines.append(f"  {DIM}└─{RESET} output: {DIM}{config.output_path}{RESET}")

    if mode == "dev":
        url = f"http://{config.host}:{config.port}/"
        if campaign is not None:
            url += f"{campaign['slug']}/"
        lines.append("")
        lines.append(f"  {_clickable_url(url)}")
        lines.append("")
        lines.append(f"  {DIM}Watching for changes...{RESET}")

    lines.append("")
    print("\n".join(lines), file=sys.stderr)


def print_build_summary(result: BuildResult) -> None:
    """Print build completion summary to stderr."""
    lines = [
        "",
        "─" * 41,
        f"  Built {plural(result.built, 'page')} in {format_duration(result.duration_ms)}",
    ]
    if result.skipped:
        lines.append(f"  {YELLOW}Skipped {plural(result.skipped, 'page')}{RESET}")
    if result.errors:
        lines.append(f"  {RED}{plural(result.errors, 'error')}{RESET}")
    lines.append(f"  Output: {result.output_dir}")

    print("\n".join(lines), file=sys.stderr)
