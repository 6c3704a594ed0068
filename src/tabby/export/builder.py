"""Page builder — discover, render, and write campaign pages.

Each campaign lives in its own directory under the source root::

    src/
      summer-sale/
        _layouts/base.html
        _includes/hero.html
        assets/css/site.css
        index.html           -> _site/summer-sale/index.html
        checkout.html        -> _site/summer-sale/checkout/index.html

A build renders every requested page through :func:`tabby.engine.render_page`
and then mirrors each campaign's ``assets/`` directory into the output.  One
broken page never stops the build: failures are logged and counted, and the
caller decides what a non-zero error count means.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from typing import TYPE_CHECKING, Any

import frontmatter

from tabby import log
from tabby._errors import ConfigError, RenderError
from tabby.engine import create_environment, render_page
from tabby.export.assets import campaign_assets_path, copy_asset_tree

if TYPE_CHECKING:
    from jinja2 import Environment

    from tabby._types import Campaign, FrontMatter, PagePath
    from tabby.config import TabbyConfig
    from tabby.observability.collector import StackCollector

LAYOUTS_DIR = "_layouts"
INCLUDES_DIR = "_includes"
DEFAULT_LAYOUT = "base.html"
PAGE_SUFFIX = ".html"

_EXCLUDED_DIRS = frozenset({LAYOUTS_DIR, INCLUDES_DIR})


@dataclass(frozen=True, slots=True)
class OutputTarget:
    """Where a page is written and the URL it is served at.

    Attributes:
        url: Pretty URL with a trailing slash (``/summer-sale/checkout/``).
        output_file: Absolute ``index.html`` path under the output root.

    """

    url: str
    output_file: Path


@dataclass(frozen=True, slots=True)
class BuiltPage:
    """Record of a single page written during a build."""

    source: str
    url: str
    output_file: Path
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Aggregate result of one build.

    Attributes:
        built: Pages rendered and written.
        errors: Pages (or asset trees) that failed.
        skipped: Pages whose slug has no campaign.
        assets: Asset files copied.
        duration_ms: Wall-clock time of the whole build.
        output_dir: Output root.
        pages: One record per written page.
        failed: Source paths of the pages that failed.

    """

    built: int
    errors: int
    skipped: int
    assets: int
    duration_ms: float
    output_dir: Path
    pages: tuple[BuiltPage, ...] = ()
    failed: tuple[str, ...] = ()

    @property
    def ms(self) -> int:
        """Elapsed time in whole milliseconds."""
        return round(self.duration_ms)


# ---------------------------------------------------------------------------
# Discovery and output resolution
# ---------------------------------------------------------------------------


def discover_pages(src_path: Path, slug: str | None = None) -> list[PagePath]:
    """Find every page under *src_path* (or only under ``<src_path>/<slug>``).

    Pages are ``*.html`` files outside ``_layouts`` and ``_includes``
    directories.  Hidden files and directories are ignored.  Paths are
    returned relative to *src_path* with ``/`` separators, sorted.
    """
    root = src_path / slug if slug else src_path
    if not root.is_dir():
        return []

    pages: list[PagePath] = []
    for path in root.rglob(f"*{PAGE_SUFFIX}"):
        if not path.is_file():
            continue
        rel = path.relative_to(src_path)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if _EXCLUDED_DIRS.intersection(rel.parts[:-1]):
            continue
        pages.append(rel.as_posix())

    return sorted(pages)


def resolve_output(rel_file: PagePath, fm: FrontMatter, output_path: Path) -> OutputTarget:
    """Resolve the URL and output file for a page.

    ``summer-sale/index.html``     -> ``/summer-sale/``
    ``summer-sale/presale.html``   -> ``/summer-sale/presale/``
    ``permalink: /custom/path/``   -> ``/custom/path/`` (wins over the file name)

    """
    permalink = fm.get("permalink")
    if permalink:
        clean = str(permalink).strip("/")
        if not clean:
            return OutputTarget(url="/", output_file=output_path / "index.html")
        return OutputTarget(url=f"/{clean}/", output_file=output_path / clean / "index.html")

    parts = PurePosixPath(rel_file).parts
    slug = parts[0]
    name = parts[-1].removesuffix(PAGE_SUFFIX)

    if name == "index":
        return OutputTarget(url=f"/{slug}/", output_file=output_path / slug / "index.html")

    return OutputTarget(
        url=f"/{slug}/{name}/",
        output_file=output_path / slug / name / "index.html",
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class PageBuilder:
    """Builds campaign pages from a source tree into an output tree.

    Args:
        src_path: Source root (one directory per campaign).
        output_path: Output root.
        campaigns: Campaign registry entries.
        env: Jinja2 environment; created for *src_path* if omitted.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        src_path: Path,
        output_path: Path,
        campaigns: Iterable[Campaign],
        *,
        env: Environment | None = None,
        collector: StackCollector | None = None,
    ) -> None:
        self._src = src_path
        self._out = output_path
        self._campaigns = list(campaigns)
        self._by_slug = {str(c["slug"]): c for c in self._campaigns}
        self._env = env if env is not None else create_environment(
            src_path, campaigns=self._campaigns,
        )
        self._collector = collector

    @property
    def env(self) -> Environment:
        return self._env

    def build(self, files: Iterable[str] | None = None) -> BuildResult:
        """Render *files* (all discovered pages if None), then copy assets.

        Raises:
            ConfigError: If the source root does not exist.

        """
        if not self._src.is_dir():
            msg = f"Source directory not found: {self._src}"
            raise ConfigError(msg)

        start = time.perf_counter()
        rel_files = discover_pages(self._src) if files is None else list(files)

        pages: list[BuiltPage] = []
        failed: list[str] = []
        skipped = 0

        for rel_file in rel_files:
            rel = PurePath(rel_file).as_posix()
            t0 = time.perf_counter()
            try:
                page = self._build_page(rel, t0)
            except Exception as exc:
                log.error(f"{rel}: {exc}")
                failed.append(rel)
                self._record("error", rel, str(exc), t0)
                continue

            if page is None:
                skipped += 1
            else:
                pages.append(page)

        assets, asset_errors = self._copy_assets()

        return BuildResult(
            built=len(pages),
            errors=len(failed) + asset_errors,
            skipped=skipped,
            assets=assets,
            duration_ms=(time.perf_counter() - start) * 1000,
            output_dir=self._out,
            pages=tuple(pages),
            failed=tuple(failed),
        )

    def clean_output(self) -> None:
        """Remove and recreate the output directory."""
        if self._out.exists():
            shutil.rmtree(self._out)
        self._out.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _build_page(self, rel: PagePath, t0: float) -> BuiltPage | None:
        """Render and write one page.  Returns None if the page was skipped."""
        source_file = self._src / rel
        post = frontmatter.loads(source_file.read_text(encoding="utf-8"))

        slug = PurePosixPath(rel).parts[0]
        campaign = self._by_slug.get(slug)
        if campaign is None:
            log.warn(f"Skipping {rel} — no campaign found for slug {slug!r}")
            self._record("skip", rel, f"unknown campaign {slug!r}", t0)
            return None

        target = resolve_output(rel, post.metadata, self._out)
        if not target.output_file.resolve().is_relative_to(self._out.resolve()):
            msg = f"permalink {post.metadata.get('permalink')!r} points outside the output directory"
            raise RenderError(msg)

        html = render_page(
            self._env,
            body=post.content,
            frontmatter=post.metadata,
            campaign=campaign,
            page={"url": target.url, "inputPath": str(source_file)},
            layout_source=self._read_layout(slug, post.metadata),
        )

        size = self._write_html(target.output_file, html)
        log.debug(f"Writing {log.muted(self._display(target.output_file))} from {log.muted(rel)}")
        elapsed = self._record("render", rel, str(target.output_file), t0)

        return BuiltPage(
            source=rel,
            url=target.url,
            output_file=target.output_file,
            size_bytes=size,
            duration_ms=elapsed,
        )

    def _read_layout(self, slug: str, fm: FrontMatter) -> str | None:
        """Return the source of the page's layout, or None if it does not exist."""
        layout_file = str(fm.get("page_layout") or DEFAULT_LAYOUT)
        layouts_dir = (self._src / slug / LAYOUTS_DIR).resolve()
        layout_path = (layouts_dir / layout_file).resolve()
        if not layout_path.is_relative_to(layouts_dir):
            msg = f"page_layout {layout_file!r} points outside {slug}/{LAYOUTS_DIR}"
            raise RenderError(msg)
        if not layout_path.is_file():
            return None
        return layout_path.read_text(encoding="utf-8")

    def _copy_assets(self) -> tuple[int, int]:
        """Mirror every campaign's assets/ into ``<output>/<slug>/``.

        Runs for all campaigns regardless of which pages were built, so a
        partial rebuild still leaves a complete output tree.

        Returns:
            (files copied, campaigns whose copy failed)

        """
        copied = 0
        errors = 0
        for slug in self._by_slug:
            asset_src = campaign_assets_path(self._src, slug)
            if not asset_src.is_dir():
                continue
            t0 = time.perf_counter()
            source = asset_src.relative_to(self._src).as_posix()
            try:
                copied += copy_asset_tree(asset_src, self._out / slug)
            except OSError as exc:
                log.error(f"{source}: {exc}")
                self._record("error", source, str(exc), t0)
                errors += 1
                continue
            self._record("copy_asset", source, str(self._out / slug), t0)
        return copied, errors

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record(self, kind: Any, source: str, target: str, t0: float) -> float:
        elapsed = (time.perf_counter() - t0) * 1000
        if self._collector is not None:
            self._collector.record_build(kind, source, target, duration_ms=elapsed)
        return elapsed

    @staticmethod
    def _display(path: Path) -> str:
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)

    @staticmethod
    def _write_html(filepath: Path, html: str) -> int:
        """Write HTML content to a file, creating parent dirs as needed.

        Returns the size in bytes of the written file.

        """
        filepath.parent.mkdir(parents=True, exist_ok=True)
        data = html.encode("utf-8")
        filepath.write_bytes(data)
        return len(data)


def build_pages(
    *,
    src_path: Path | str | None = None,
    output_path: Path | str | None = None,
    campaigns: Iterable[Campaign] | None = None,
    env: Environment | None = None,
    files: Iterable[str] | None = None,
    collector: StackCollector | None = None,
    config: TabbyConfig | None = None,
) -> BuildResult:
    """Build campaign pages.

    Every omitted location comes from *config* (a default ``TabbyConfig``
    rooted at the current directory when that is omitted too):
    ``src/``, ``_site/`` and ``_data/campaigns.json``.

    Args:
        src_path: Source root.
        output_path: Output root.
        campaigns: Campaign registry entries.
        env: Existing environment to reuse across builds.
        files: Source-relative pages to build; None discovers every page.
        collector: Optional observability collector.
        config: Project configuration supplying defaults.

    Raises:
        ConfigError: If the registry is missing or the source root does not exist.

    """
    if config is None:
        from tabby.config import TabbyConfig

        config = TabbyConfig()

    if campaigns is None:
        from tabby.config_loader import load_campaigns

        campaigns = load_campaigns(config.campaigns_path)

    builder = PageBuilder(
        Path(src_path) if src_path is not None else config.src_path,
        Path(output_path) if output_path is not None else config.output_path,
        campaigns,
        env=env,
        collector=collector,
    )
    return builder.build(files)
