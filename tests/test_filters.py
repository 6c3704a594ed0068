"""Tests for tabby.engine.filters — campaign-aware URL filters."""

from __future__ import annotations

import pytest

from tabby.engine.filters import is_absolute_url

from .conftest import CAMPAIGN


def _render(env, source: str, **context: object) -> str:
    return env.from_string(source).render(context)


class TestIsAbsoluteUrl:
    @pytest.mark.parametrize("url", [
        "https://cdn.example.com/a.png",
        "http://example.com",
        "ftp://files.example.com/x",
    ])
    def test_absolute(self, url: str) -> None:
        assert is_absolute_url(url)

    @pytest.mark.parametrize("url", ["img/a.png", "/img/a.png", "#top", "mailto:x@y.z"])
    def test_not_absolute(self, url: str) -> None:
        assert not is_absolute_url(url)


class TestCampaignAsset:
    """``campaign_asset`` prefixes the campaign slug."""

    def test_prefixes_slug(self, env) -> None:
        out = _render(env, "{{ 'img/hero.png' | campaign_asset }}", campaign=CAMPAIGN)
        assert out == "/summer-sale/img/hero.png"

    def test_absolute_url_unchanged(self, env) -> None:
        url = "https://cdn.example.com/hero.png"
        out = _render(env, "{{ url | campaign_asset }}", campaign=CAMPAIGN, url=url)
        assert out == url

    def test_empty_input(self, env) -> None:
        assert _render(env, "{{ '' | campaign_asset }}", campaign=CAMPAIGN) == ""

    def test_undefined_input(self, env) -> None:
        assert _render(env, "{{ missing | campaign_asset }}", campaign=CAMPAIGN) == ""

    def test_no_campaign_returns_input(self, env) -> None:
        assert _render(env, "{{ 'img/a.png' | campaign_asset }}") == "img/a.png"


class TestCampaignLink:
    """``campaign_link`` produces pretty URLs."""

    def test_page_link(self, env) -> None:
        out = _render(env, "{{ 'checkout.html' | campaign_link }}", campaign=CAMPAIGN)
        assert out == "/summer-sale/checkout/"

    def test_index_link(self, env) -> None:
        out = _render(env, "{{ 'index.html' | campaign_link }}", campaign=CAMPAIGN)
        assert out == "/summer-sale/"

    def test_name_without_suffix(self, env) -> None:
        out = _render(env, "{{ 'presale' | campaign_link }}", campaign=CAMPAIGN)
        assert out == "/summer-sale/presale/"

    @pytest.mark.parametrize("href", ["#terms", "/other/", "https://example.com/"])
    def test_passthrough(self, env, href: str) -> None:
        out = _render(env, "{{ href | campaign_link }}", campaign=CAMPAIGN, href=href)
        assert out == href

    def test_empty_input(self, env) -> None:
        assert _render(env, "{{ '' | campaign_link }}", campaign=CAMPAIGN) == ""

    def test_no_campaign_returns_input(self, env) -> None:
        assert _render(env, "{{ 'checkout.html' | campaign_link }}") == "checkout.html"


class TestSafe:
    def test_safe_is_identity(self, env) -> None:
        assert _render(env, "{{ '<b>hi</b>' | safe }}") == "<b>hi</b>"
