"""Tests for tabby.app — build and dev entry points, rebuild callback."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tabby._errors import ConfigError
from tabby.app import _select_campaign, build, dev, make_rebuild_callback
from tabby.config_loader import load_campaigns
from tabby.export import PageBuilder
from tabby.server import DevServer

type WriteFile = Callable[[str, str], Path]


def _builder(tmp_project: Path) -> PageBuilder:
    campaigns = load_campaigns(tmp_project / "_data" / "campaigns.json")
    return PageBuilder(tmp_project / "src", tmp_project / "_site", campaigns)


class TestSelectCampaign:
    CAMPAIGNS = [{"name": "A", "slug": "a"}, {"name": "B", "slug": "b"}]

    def test_none_selects_nothing(self) -> None:
        assert _select_campaign(self.CAMPAIGNS, None) is None

    def test_known_slug(self) -> None:
        assert _select_campaign(self.CAMPAIGNS, "b") == {"name": "B", "slug": "b"}

    def test_unknown_slug_raises(self) -> None:
        with pytest.raises(ConfigError, match="registered: a, b"):
            _select_campaign(self.CAMPAIGNS, "c")


class TestBuild:
    def test_builds_every_campaign(self, tmp_project: Path) -> None:
        result = build(tmp_project)
        assert result.built == 3
        assert result.errors == 0
        assert (tmp_project / "_site" / "summer-sale" / "checkout" / "index.html").is_file()

    def test_output_override(self, tmp_project: Path) -> None:
        build(tmp_project, output="public")
        assert (tmp_project / "public" / "winter" / "index.html").is_file()

    def test_clean_removes_stale_files(self, tmp_project: Path) -> None:
        stale = tmp_project / "_site" / "old" / "index.html"
        stale.parent.mkdir(parents=True)
        stale.write_text("old")
        build(tmp_project, clean=True)
        assert not stale.exists()

    def test_prints_summary(self, tmp_project: Path, capsys) -> None:
        build(tmp_project)
        err = capsys.readouterr().err
        assert "Built 3 pages" in err

    def test_missing_registry_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            build(tmp_path)


class TestRebuildCallback:
    """The dev server's rebuild callback picks the smallest scope."""

    @pytest.mark.asyncio
    async def test_page_change_rebuilds_only_that_page(self, tmp_project: Path) -> None:
        src = tmp_project / "src"
        on_rebuild = make_rebuild_callback(_builder(tmp_project), src)

        await on_rebuild(src / "winter" / "index.html")
        assert (tmp_project / "_site" / "winter" / "index.html").is_file()
        assert not (tmp_project / "_site" / "summer-sale" / "index.html").exists()

    @pytest.mark.asyncio
    async def test_layout_change_rebuilds_campaign(
        self, tmp_project: Path, write_file: WriteFile,
    ) -> None:
        src = tmp_project / "src"
        on_rebuild = make_rebuild_callback(_builder(tmp_project), src)

        layout = write_file("src/summer-sale/_layouts/base.html", "<main>{{ content }}</main>")
        await on_rebuild(layout)

        out = tmp_project / "_site"
        assert (out / "summer-sale" / "index.html").read_text().startswith("<main>")
        assert (out / "summer-sale" / "checkout" / "index.html").read_text().startswith("<main>")
        assert not (out / "winter" / "index.html").exists()

    @pytest.mark.asyncio
    async def test_include_change_is_picked_up(
        self, tmp_project: Path, write_file: WriteFile,
    ) -> None:
        src = tmp_project / "src"
        builder = _builder(tmp_project)
        builder.build()
        on_rebuild = make_rebuild_callback(builder, src)

        hero = write_file("src/summer-sale/_includes/hero.html", "<h2>{{ include.title }}</h2>")
        await on_rebuild(hero)
        index = (tmp_project / "_site" / "summer-sale" / "index.html").read_text()
        assert "<h2>Summer Sale</h2>" in index

    @pytest.mark.asyncio
    async def test_asset_change_copies_assets(
        self, tmp_project: Path, write_file: WriteFile, capsys,
    ) -> None:
        src = tmp_project / "src"
        on_rebuild = make_rebuild_callback(_builder(tmp_project), src)

        css = write_file("src/summer-sale/assets/css/site.css", "body { color: red; }")
        await on_rebuild(css)
        copied = tmp_project / "_site" / "summer-sale" / "css" / "site.css"
        assert copied.read_text() == "body { color: red; }"
        assert not (tmp_project / "_site" / "summer-sale" / "index.html").exists()
        assert "Assets copied" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_full_rebuild_respects_campaign_filter(self, tmp_project: Path) -> None:
        src = tmp_project / "src"
        on_rebuild = make_rebuild_callback(_builder(tmp_project), src, only_slug="winter")

        await on_rebuild(None)
        assert (tmp_project / "_site" / "winter" / "index.html").is_file()
        assert not (tmp_project / "_site" / "summer-sale" / "index.html").exists()


class TestDev:
    """dev() builds and hands off to the server (run() is stubbed)."""

    @pytest.fixture
    def runs(self, monkeypatch: pytest.MonkeyPatch) -> list[DevServer]:
        started: list[DevServer] = []
        monkeypatch.setattr(DevServer, "run", lambda self: started.append(self))
        return started

    def test_initial_build_and_serve(self, tmp_project: Path, runs: list[DevServer]) -> None:
        dev(tmp_project)
        assert len(runs) == 1
        assert (tmp_project / "_site" / "winter" / "index.html").is_file()
        assert (tmp_project / "_site" / "summer-sale" / "index.html").is_file()

    def test_single_campaign(self, tmp_project: Path, runs: list[DevServer]) -> None:
        dev(tmp_project, campaign="winter")
        assert (tmp_project / "_site" / "winter" / "index.html").is_file()
        assert not (tmp_project / "_site" / "summer-sale" / "index.html").exists()

    def test_unknown_campaign_raises(self, tmp_project: Path, runs: list[DevServer]) -> None:
        with pytest.raises(ConfigError, match="Unknown campaign"):
            dev(tmp_project, campaign="nope")
        assert runs == []

    def test_banner_shows_campaign_url(
        self, tmp_project: Path, runs: list[DevServer], capsys,
    ) -> None:
        dev(tmp_project, campaign="winter", port=4123)
        assert "http://127.0.0.1:4123/winter/" in capsys.readouterr().err
