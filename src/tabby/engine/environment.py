"""Template environment — one Jinja2 environment per build or dev session."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from jinja2 import ChainableUndefined, Environment, FileSystemLoader

from tabby._types import Campaign
from tabby.engine.filters import FILTERS
from tabby.engine.include import CampaignIncludeExtension


def create_environment(
    src_path: str | Path,
    *,
    campaigns: Iterable[Campaign] = (),
) -> Environment:
    """Create the Jinja2 environment used to render campaign pages.

    Templates are loaded from *src_path* with the template cache disabled,
    so layouts and includes edited during ``tabby dev`` are always re-read.
    Undefined variables render as empty strings, and chained lookups on
    them (``{{ offer.price.amount }}``) do not raise.

    Args:
        src_path: Source root containing one directory per campaign.
        campaigns: Registry entries, exposed to every template as ``campaigns``.

    """
    env = Environment(
        loader=FileSystemLoader(str(src_path)),
        extensions=[CampaignIncludeExtension],
        autoescape=False,
        cache_size=0,
        auto_reload=True,
        keep_trailing_newline=True,
        undefined=ChainableUndefined,
    )
    env.filters.update(FILTERS)
    env.globals["campaigns"] = list(campaigns)
    return env
