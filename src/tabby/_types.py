"""Shared type definitions for tabby."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from pathlib import Path

# Mode of operation
type TabbyMode = Literal["dev", "build"]

# One entry of the campaign registry ({"name": ..., "slug": ..., ...})
type Campaign = dict[str, Any]

# Parsed front-matter of a content page
type FrontMatter = dict[str, Any]

# Source-relative page path, POSIX separators (e.g. "summer-sale/index.html")
type PagePath = str

# Async rebuild callback handed to the dev server; None means "rebuild all"
type RebuildCallback = Callable[[Path | None], Awaitable[None]]
