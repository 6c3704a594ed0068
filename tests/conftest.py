"""Shared test fixtures for tabby."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tabby.engine import create_environment

CAMPAIGN: dict[str, Any] = {"name": "Summer Sale", "slug": "summer-sale"}

BASE_LAYOUT = (
    "<html><head><title>{{ title }}</title></head>"
    "<body>{{ content }}</body></html>"
)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes *text* to ``tmp_path / rel`` and returns the path."""

    def _write(rel: str, text: str) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def src_path(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    src.mkdir()
    return src


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    return tmp_path / "_site"


@pytest.fixture
def env(src_path: Path):
    return create_environment(src_path, campaigns=[CAMPAIGN])


@pytest.fixture
def tmp_project(tmp_path: Path, write_file: Callable[[str, str], Path]) -> Path:
    """A two-campaign project with layouts, an include, assets, and pages."""
    registry = {
        "campaigns": [
            CAMPAIGN,
            {"name": "Winter Deals", "slug": "winter"},
        ]
    }
    write_file("_data/campaigns.json", json.dumps(registry))

    write_file("src/summer-sale/_layouts/base.html", BASE_LAYOUT)
    write_file(
        "src/summer-sale/_includes/hero.html",
        "<h1>{{ include.title }}</h1>",
    )
    write_file("src/summer-sale/assets/css/site.css", "body { margin: 0; }\n")
    write_file(
        "src/summer-sale/index.html",
        "---\ntitle: Home\n---\n"
        "{% campaign_include 'hero.html' title=\"Summer Sale\" %}"
        "<link href=\"{{ 'css/site.css' | campaign_asset }}\">",
    )
    write_file(
        "src/summer-sale/checkout.html",
        "---\ntitle: Checkout\n---\n<a href=\"{{ 'index.html' | campaign_link }}\">back</a>",
    )

    write_file("src/winter/_layouts/base.html", BASE_LAYOUT)
    write_file("src/winter/index.html", "---\ntitle: Winter\n---\n<p>{{ campaign.name }}</p>")

    return tmp_path
