"""Tabby application — the public build and dev entry points.

``build`` renders every campaign once.  ``dev`` builds, then serves the
output with live reload and rebuilds the smallest scope on every change.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from tabby import log
from tabby._errors import ConfigError
from tabby.config_loader import load_campaigns, load_config

if TYPE_CHECKING:
    from tabby._types import Campaign, RebuildCallback
    from tabby.export.builder import BuildResult, PageBuilder


def _select_campaign(campaigns: list[Campaign], slug: str | None) -> Campaign | None:
    """Return the campaign for *slug* (None when no slug was requested).

    Raises:
        ConfigError: If *slug* is not in the registry.

    """
    if slug is None:
        return None
    for campaign in campaigns:
        if campaign["slug"] == slug:
            return campaign
    known = ", ".join(str(c["slug"]) for c in campaigns) or "none"
    msg = f"Unknown campaign {slug!r} (registered: {known})"
    raise ConfigError(msg)


def _log_result(result: BuildResult, *, verb: str = "Built") -> None:
    timing = log.format_duration(result.duration_ms)
    suffix = f" ({log.plural(result.errors, 'error')})" if result.errors else ""
    log.info(f"{verb} {log.plural(result.built, 'page')} in {timing}{suffix}")


def make_rebuild_callback(
    builder: PageBuilder,
    src_path: Path,
    *,
    only_slug: str | None = None,
) -> RebuildCallback:
    """Create the dev server's rebuild callback.

    The changed path is classified into a :class:`RebuildScope`; the build
    itself runs in a worker thread so the server keeps answering requests.
    """
    from tabby.reactive.scope import classify_change

    async def on_rebuild(changed: Path | None) -> None:
        scope = classify_change(changed, src_path)
        files = scope.resolve_files(src_path, only_slug=only_slug)
        result = await asyncio.to_thread(builder.build, files)

        if scope.kind == "assets":
            log.info(f"Assets copied in {log.format_duration(result.duration_ms)}")
        else:
            _log_result(result, verb="Rebuilt")

    return on_rebuild


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def build(root: str | Path = ".", **kwargs: object) -> BuildResult:
    """Build every campaign into the output directory.

    Args:
        root: Project root directory.
        **kwargs: Override TabbyConfig fields.

    Returns:
        The BuildResult; callers decide what a non-zero ``errors`` means.

    Raises:
        ConfigError: If the registry or source directory is missing.

    """
    from tabby.banner import print_banner, print_build_summary
    from tabby.export.builder import PageBuilder

    config = load_config(Path(root), **kwargs)
    campaigns = load_campaigns(config.campaigns_path)

    print_banner(config, campaigns, mode="build")

    builder = PageBuilder(config.src_path, config.output_path, campaigns)
    if config.clean:
        builder.clean_output()
    result = builder.build()

    print_build_summary(result)
    return result


def dev(root: str | Path = ".", *, campaign: str | None = None, **kwargs: object) -> None:
    """Build, then serve with live reload until interrupted.

    Args:
        root: Project root directory.
        campaign: Restrict the session to this campaign slug.
        **kwargs: Override TabbyConfig fields.

    """
    from tabby.banner import print_banner
    from tabby.engine import create_environment
    from tabby.export.builder import PageBuilder, discover_pages
    from tabby.observability import EventLog, StackCollector
    from tabby.server import DevServer

    config = load_config(Path(root), **kwargs)
    campaigns = load_campaigns(config.campaigns_path)
    selected = _select_campaign(campaigns, campaign)
    src_path = config.src_path.resolve()

    if not src_path.is_dir():
        msg = f"Source directory not found: {src_path}"
        raise ConfigError(msg)

    collector = StackCollector(EventLog())
    builder = PageBuilder(
        src_path,
        config.output_path,
        [selected] if selected is not None else campaigns,
        env=create_environment(src_path, campaigns=campaigns),
        collector=collector,
    )

    only_slug = str(selected["slug"]) if selected is not None else None
    initial = discover_pages(src_path, only_slug) if only_slug else None
    _log_result(builder.build(initial))

    server = DevServer(
        config.output_path,
        src_path,
        make_rebuild_callback(builder, src_path, only_slug=only_slug),
        host=config.host,
        port=config.port,
        reload_path=config.reload_path,
        collector=collector,
    )

    print_banner(config, campaigns, mode="dev", campaign=selected)
    server.run()
