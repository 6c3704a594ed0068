"""Campaign-aware template filters.

Both URL filters read the campaign from the render context they are called
in (``jinja2.pass_context``), so the same template renders correctly for
every campaign that includes it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from jinja2 import pass_context
from jinja2.runtime import Context

# scheme://... (https://cdn..., http://..., ftp://...)
_ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def is_absolute_url(value: str) -> bool:
    return bool(_ABSOLUTE_URL.match(value))


def campaign_slug(context: Context) -> str | None:
    """Return the slug of the campaign in *context*, or None outside a campaign."""
    campaign = context.get("campaign")
    if not campaign:
        return None
    if isinstance(campaign, Mapping):
        slug = campaign.get("slug")
    else:
        slug = getattr(campaign, "slug", None)
    return str(slug) if slug else None


@pass_context
def campaign_asset(context: Context, filename: Any) -> str:
    """Resolve an asset filename to ``/<slug>/<filename>``.

    Absolute URLs pass through; outside a campaign the filename is returned
    unchanged.
    """
    if not filename:
        return ""
    filename = str(filename)
    if is_absolute_url(filename):
        return filename
    slug = campaign_slug(context)
    if slug is None:
        return filename
    return f"/{slug}/{filename}"


@pass_context
def campaign_link(context: Context, filename: Any) -> str:
    """Turn a page filename into the campaign's pretty URL.

    ``checkout.html`` -> ``/<slug>/checkout/``, ``index.html`` -> ``/<slug>/``.
    Anchors, root-relative paths, and absolute URLs are returned as-is.
    """
    if not filename:
        return ""
    filename = str(filename)
    if filename.startswith(("#", "/")) or is_absolute_url(filename):
        return filename
    slug = campaign_slug(context)
    if slug is None:
        return filename
    name = filename.removesuffix(".html")
    if name == "index":
        return f"/{slug}/"
    return f"/{slug}/{name}/"


def safe(value: Any) -> Any:
    """No-op: templates written for auto-escaping engines pipe through ``safe``."""
    return value


FILTERS: dict[str, Any] = {
    "campaign_asset": campaign_asset,
    "campaign_link": campaign_link,
    "safe": safe,
}
