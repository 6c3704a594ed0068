"""Tests for tabby.server — static serving, reload stream, and stats."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from starlette.requests import Request
from starlette.testclient import TestClient

from tabby._errors import ServeError
from tabby.observability import EventLog, StackCollector
from tabby.server import DevServer


async def _noop_rebuild(changed: Path | None) -> None:
    pass


@pytest.fixture
def site(tmp_path: Path) -> Path:
    out = tmp_path / "_site"
    (out / "summer-sale" / "checkout").mkdir(parents=True)
    (out / "summer-sale" / "index.html").write_text("<html><body>home</body></html>")
    (out / "summer-sale" / "checkout" / "index.html").write_text("<p>checkout</p>")
    (out / "summer-sale" / "site.css").write_text("body { margin: 0; }")
    (tmp_path / "secret.txt").write_text("secret")
    (tmp_path / "src").mkdir()
    return out


@pytest.fixture
def server(site: Path) -> DevServer:
    return DevServer(
        site,
        site.parent / "src",
        _noop_rebuild,
        collector=StackCollector(EventLog()),
        watch=False,
    )


@pytest.fixture
def client(server: DevServer) -> TestClient:
    return TestClient(server.app)


# ---------------------------------------------------------------------------
# Static files
# ---------------------------------------------------------------------------


class TestServeFiles:
    """Files from the output root, HTML with the reload script."""

    def test_directory_serves_index(self, client: TestClient) -> None:
        resp = client.get("/summer-sale/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "home" in resp.text

    def test_reload_script_injected(self, client: TestClient) -> None:
        text = client.get("/summer-sale/").text
        assert "EventSource('/_lr')" in text
        assert text.index("data-tabby-reload") < text.index("</body>")

    def test_fragment_gets_script_appended(self, client: TestClient) -> None:
        text = client.get("/summer-sale/checkout/").text
        assert text.startswith("<p>checkout</p><script")

    def test_explicit_index_file(self, client: TestClient) -> None:
        resp = client.get("/summer-sale/index.html")
        assert resp.status_code == 200
        assert "data-tabby-reload" in resp.text

    def test_non_html_passthrough(self, client: TestClient) -> None:
        resp = client.get("/summer-sale/site.css")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/css")
        assert resp.text == "body { margin: 0; }"

    def test_missing_file_404(self, client: TestClient) -> None:
        resp = client.get("/summer-sale/nope/")
        assert resp.status_code == 404
        assert resp.text == "Not found"

    def test_root_without_index_404(self, client: TestClient) -> None:
        assert client.get("/").status_code == 404

    def test_unreadable_file_500(self, client: TestClient, capsys) -> None:
        with patch.object(Path, "read_bytes", side_effect=OSError("permission denied")):
            resp = client.get("/summer-sale/site.css")
        assert resp.status_code == 500
        assert resp.text == "Server error"
        assert "permission denied" in capsys.readouterr().err


class TestResolvePath:
    def test_directory_maps_to_index(self, server: DevServer, site: Path) -> None:
        assert server.resolve_path("summer-sale") == (site / "summer-sale" / "index.html").resolve()

    def test_leading_slash(self, server: DevServer, site: Path) -> None:
        assert server.resolve_path("/summer-sale/site.css") == (site / "summer-sale" / "site.css").resolve()

    def test_traversal_rejected(self, server: DevServer) -> None:
        assert server.resolve_path("../secret.txt") is None
        assert server.resolve_path("summer-sale/../../secret.txt") is None

    def test_missing_returns_none(self, server: DevServer) -> None:
        assert server.resolve_path("nope.html") is None


# ---------------------------------------------------------------------------
# Reload stream and stats
# ---------------------------------------------------------------------------


class TestReloadStream:
    """The event stream registers a client and forwards broadcasts."""

    @pytest.mark.asyncio
    async def test_stream_lifecycle(self, server: DevServer) -> None:
        request = Request({"type": "http", "method": "GET", "path": "/_lr", "headers": []})
        response = await server._reload_stream(request)
        assert response.media_type == "text/event-stream"
        assert response.headers["cache-control"] == "no-cache"

        body = response.body_iterator
        assert await anext(body) == ": connected\n\n"
        assert server.broadcaster.client_count == 1

        assert server.broadcaster.broadcast() == 1
        assert await anext(body) == "data: reload\n\n"

        await body.aclose()
        assert server.broadcaster.client_count == 0

    def test_reload_route_registered(self, server: DevServer) -> None:
        paths = [route.path for route in server.app.routes]
        assert paths[0] == "/_lr"
        assert "/_stats" in paths

    def test_custom_reload_path(self, site: Path) -> None:
        server = DevServer(site, site.parent / "src", _noop_rebuild, reload_path="/_live", watch=False)
        assert server.app.routes[0].path == "/_live"
        text = TestClient(server.app).get("/summer-sale/").text
        assert "EventSource('/_live')" in text


class TestServerSetup:
    @pytest.mark.parametrize("reload_path", ["_lr", "/", "/_stats"])
    def test_invalid_reload_path(self, site: Path, reload_path: str) -> None:
        with pytest.raises(ServeError, match="Invalid reload path"):
            DevServer(site, site.parent / "src", _noop_rebuild, reload_path=reload_path, watch=False)


class TestStats:
    def test_stats_payload(self, client: TestClient) -> None:
        data = client.get("/_stats").json()
        assert data["state"] == "idle"
        assert data["clients"] == 0
        assert data["event_log"]["total"] == 0
        assert data["recent_reloads"] == []

    def test_stats_recent_reloads(self, server: DevServer, client: TestClient) -> None:
        server._collector.record_reload("src/summer-sale/index.html", ok=True, clients_notified=2)
        server._collector.record_build("render", "summer-sale/index.html", "_site/summer-sale/index.html")
        data = client.get("/_stats").json()
        (reload,) = data["recent_reloads"]
        assert reload["trigger_path"] == "src/summer-sale/index.html"
        assert reload["ok"] is True
        assert reload["clients_notified"] == 2
        assert data["event_log"]["total"] == 2

    def test_stats_without_collector(self, site: Path) -> None:
        server = DevServer(site, site.parent / "src", _noop_rebuild, watch=False)
        data = TestClient(server.app).get("/_stats").json()
        assert "event_log" not in data


class TestCoordinatorWiring:
    @pytest.mark.asyncio
    async def test_successful_rebuild_broadcasts(self, server: DevServer) -> None:
        client = server.broadcaster.connect()
        await server.coordinator.trigger(None)
        assert client.queue.get_nowait() == "reload"
