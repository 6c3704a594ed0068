"""Tabby — build, preview, and live-reload multi-page campaign sites.

Each campaign is a directory of Jinja2 pages with its own layouts,
includes, and assets.  Tabby renders them to pretty URLs and serves the
result with live reload while you edit.

Quick start::

    import tabby

    tabby.build("my-project/")                 # Render into _site/
    tabby.dev("my-project/", campaign="sale")  # Serve with live reload

Project layout::

    _data/campaigns.json     {"campaigns": [{"name": ..., "slug": ...}]}
    src/<slug>/_layouts/     page layouts (base.html by default)
    src/<slug>/_includes/    partials for {% campaign_include %}
    src/<slug>/assets/       copied to _site/<slug>/
    src/<slug>/*.html        pages

"""

__version__ = "0.1.0"
__all__ = [
    "TabbyConfig",
    "__version__",
    "build",
    "build_pages",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tabby`` fast while providing a clean top-level API.
    """
    if name == "TabbyConfig":
        from tabby.config import TabbyConfig

        return TabbyConfig

    if name == "build":
        from tabby.app import build

        return build

    if name == "dev":
        from tabby.app import dev

        return dev

    if name == "build_pages":
        from tabby.export.builder import build_pages

        return build_pages

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
