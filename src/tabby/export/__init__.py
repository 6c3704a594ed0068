"""Export layer — campaign pages and assets written to the output tree."""

from tabby.export.builder import (
    BuildResult,
    BuiltPage,
    OutputTarget,
    PageBuilder,
    build_pages,
    discover_pages,
    resolve_output,
)

__all__ = [
    "BuildResult",
    "BuiltPage",
    "OutputTarget",
    "PageBuilder",
    "build_pages",
    "discover_pages",
    "resolve_output",
]
