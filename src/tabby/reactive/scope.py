"""Rebuild scope — which pages a source change requires re-rendering.

    src/<slug>/_layouts/… or _includes/…   -> every page of that campaign
    src/<slug>/<page>.html (exists)         -> just that page
    src/_layouts/… or src/_includes/…       -> everything
    anything else (assets, deleted pages)   -> no pages; assets are re-copied
    no path                                 -> everything

Every scope still runs a build, because the build always re-copies assets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from tabby.export.builder import INCLUDES_DIR, LAYOUTS_DIR, PAGE_SUFFIX, discover_pages

if TYPE_CHECKING:
    from pathlib import Path

    from tabby._types import PagePath

_SHARED_DIRS = frozenset({LAYOUTS_DIR, INCLUDES_DIR})


@dataclass(frozen=True, slots=True)
class RebuildScope:
    """The part of the site a change invalidates.

    Attributes:
        kind: ``all``, ``campaign`` (layouts/includes), ``page`` or ``assets``.
        slug: Campaign the change belongs to, when known.
        files: Pages to render for ``page`` and ``assets`` scopes.

    """

    kind: Literal["all", "campaign", "page", "assets"]
    slug: str | None = None
    files: tuple[PagePath, ...] = ()

    def resolve_files(self, src_path: Path, *, only_slug: str | None = None) -> list[PagePath] | None:
        """Return the ``files`` argument for a build of this scope.

        ``None`` means full discovery.  With *only_slug* set (a dev session
        restricted to one campaign) full discovery is narrowed to it.
        """
        if self.kind == "all":
            return discover_pages(src_path, only_slug) if only_slug else None
        if self.kind == "campaign":
            return discover_pages(src_path, self.slug)
        return list(self.files)


def classify_change(changed: Path | None, src_path: Path) -> RebuildScope:
    """Map a changed path to the :class:`RebuildScope` it requires."""
    if changed is None:
        return RebuildScope(kind="all")

    try:
        rel = changed.relative_to(src_path)
    except ValueError:
        return RebuildScope(kind="assets")

    parts = rel.parts
    if not parts:
        return RebuildScope(kind="all")

    if parts[0] in _SHARED_DIRS:
        return RebuildScope(kind="all")

    slug = parts[0] if len(parts) > 1 else None

    if _SHARED_DIRS.intersection(parts):
        return RebuildScope(kind="campaign", slug=slug)

    if rel.suffix == PAGE_SUFFIX and changed.is_file():
        return RebuildScope(kind="page", slug=slug, files=(rel.as_posix(),))

    return RebuildScope(kind="assets", slug=slug)
