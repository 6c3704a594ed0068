"""Template engine layer — Jinja2 environment, campaign filters, and page rendering."""

from tabby.engine.environment import create_environment
from tabby.engine.include import CampaignIncludeExtension
from tabby.engine.render import build_context, render_page

__all__ = [
    "CampaignIncludeExtension",
    "build_context",
    "create_environment",
    "render_page",
]
