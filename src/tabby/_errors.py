"""Tabby error hierarchy.

All tabby-specific errors inherit from TabbyError for easy catching.
"""


class TabbyError(Exception):
    """Base error for all tabby operations."""


class ConfigError(TabbyError):
    """Invalid or missing configuration (registry, source tree, config file)."""


class RenderError(TabbyError):
    """A single page failed to render or write."""


class ServeError(TabbyError):
    """Error while setting up or running the dev server."""
