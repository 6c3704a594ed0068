"""Two-pass page rendering: page body first, then wrapped in its layout."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jinja2 import Environment

    from tabby._types import Campaign, FrontMatter


def build_context(
    frontmatter: FrontMatter,
    campaign: Campaign | None,
    page: dict[str, Any],
) -> dict[str, Any]:
    """Assemble a fresh render context: front-matter, ``campaign`` and ``page``."""
    return {**frontmatter, "campaign": campaign, "page": page}


def render_page(
    env: Environment,
    *,
    body: str,
    frontmatter: FrontMatter,
    campaign: Campaign | None,
    page: dict[str, Any],
    layout_source: str | None = None,
) -> str:
    """Render a single page.

    Pass 1 renders *body*. Pass 2, when *layout_source* is given, renders the
    layout with the same values plus ``content`` set to the pass-1 output.
    Each pass gets its own context, so nothing set while rendering the body
    is visible to the layout.

    Args:
        env: Environment from :func:`tabby.engine.create_environment`.
        body: Page source with front-matter stripped.
        frontmatter: Parsed front-matter.
        campaign: Registry entry of the page's campaign.
        page: Page metadata (``url``, ``inputPath``).
        layout_source: Layout template source, or None to skip the layout.

    """
    content = env.from_string(body).render(build_context(frontmatter, campaign, page))

    if layout_source is None:
        return content

    context = build_context(frontmatter, campaign, page)
    context["content"] = content
    return env.from_string(layout_source).render(context)
