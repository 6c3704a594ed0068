"""Dev server — serves the output tree with live reload.

Routes:
    ``GET <reload_path>``  event stream; every rebuild pushes ``data: reload``
    ``GET /_stats``        JSON summary of the event log and the last reloads
    ``GET /…``             files from the output root, ``index.html`` for
                           directories, reload script injected into HTML

While running, the source root is watched and each change goes through the
:class:`~tabby.reactive.rebuild.RebuildCoordinator`, which calls the
injected rebuild callback and broadcasts a reload when it succeeds.
"""

from __future__ import annotations

import asyncio
import contextlib
import mimetypes
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any

import uvicorn
from starlette.applications import Starlette
from starlette.responses import (
    HTMLResponse,
    JSONResponse,
    PlainTextResponse,
    Response,
    StreamingResponse,
)
from starlette.routing import Route

from tabby import log
from tabby._errors import ServeError
from tabby.observability.events import ReloadEvent
from tabby.reactive.broadcaster import ReloadBroadcaster
from tabby.reactive.hmr import inject_reload_script
from tabby.reactive.rebuild import RebuildCoordinator
from tabby.reactive.watcher import SourceWatcher

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request

    from tabby._types import RebuildCallback
    from tabby.observability.collector import StackCollector

STATS_ENDPOINT = "/_stats"
RECENT_RELOADS = 10

_HTML_SUFFIXES = frozenset({".html", ".htm"})


class DevServer:
    """Static file server with a live-reload channel and a source watcher.

    Args:
        output_path: Directory to serve.
        src_path: Directory to watch.
        on_rebuild: Async rebuild callback; receives the changed path.
        host: Bind address.
        port: Bind port.
        reload_path: URL path of the event stream.
        collector: Optional observability collector (adds the event log to ``/_stats``).
        watch: Start the source watcher with the app (off in tests).

    Raises:
        ServeError: If *reload_path* is not an absolute path or shadows
            another route.

    """

    def __init__(
        self,
        output_path: Path,
        src_path: Path,
        on_rebuild: RebuildCallback,
        *,
        host: str = "127.0.0.1",
        port: int = 3000,
        reload_path: str = "/_lr",
        collector: StackCollector | None = None,
        watch: bool = True,
    ) -> None:
        if not reload_path.startswith("/") or reload_path in ("/", STATS_ENDPOINT):
            msg = f"Invalid reload path {reload_path!r}: must be an absolute path other than / and {STATS_ENDPOINT}"
            raise ServeError(msg)

        self._out = output_path
        self._src = src_path
        self._host = host
        self._port = port
        self._reload_path = reload_path
        self._collector = collector
        self._watcher = SourceWatcher(src_path) if watch else None
        self._tasks: set[asyncio.Task[None]] = set()

        self.broadcaster = ReloadBroadcaster()
        self.coordinator = RebuildCoordinator(
            on_rebuild,
            on_complete=self.broadcaster.broadcast,
            collector=collector,
        )
        self.app = Starlette(
            routes=[
                Route(reload_path, self._reload_stream, name="tabby:reload"),
                Route(STATS_ENDPOINT, self._stats, name="tabby:stats"),
                Route("/{path:path}", self._serve_file, name="tabby:files"),
            ],
            lifespan=self._lifespan,
        )

    def run(self) -> None:
        """Serve until interrupted."""
        log.info(f"Server at {log.CYAN}http://{self._host}:{self._port}/{log.RESET}")
        uvicorn.run(
            self.app,
            host=self._host,
            port=self._port,
            log_level="warning",
            timeout_graceful_shutdown=1,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @contextlib.asynccontextmanager
    async def _lifespan(self, app: Starlette) -> AsyncIterator[None]:
        watch_task: asyncio.Task[None] | None = None
        if self._watcher is not None:
            watch_task = asyncio.create_task(self._consume_changes())
        try:
            yield
        finally:
            if self._watcher is not None:
                self._watcher.stop()
            if watch_task is not None:
                await watch_task
            await self.coordinator.wait_idle()

    async def _consume_changes(self) -> None:
        assert self._watcher is not None
        async for event in self._watcher.changes():
            task = asyncio.create_task(self.coordinator.trigger(event.path))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _reload_stream(self, request: Request) -> Response:
        broadcaster = self.broadcaster

        async def stream() -> AsyncIterator[str]:
            client = broadcaster.connect()
            try:
                yield ": connected\n\n"
                async for message in broadcaster.listen(client):
                    yield f"data: {message}\n\n"
            finally:
                broadcaster.disconnect(client)

        return StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    async def _stats(self, request: Request) -> Response:
        payload: dict[str, Any] = {
            "state": self.coordinator.state,
            "clients": self.broadcaster.client_count,
        }
        if self._collector is not None:
            payload["event_log"] = self._collector.log.stats()
            payload["recent_reloads"] = [
                asdict(event)
                for event in self._collector.log.recent(RECENT_RELOADS, kind=ReloadEvent)
            ]
        return JSONResponse(payload)

    async def _serve_file(self, request: Request) -> Response:
        file_path = self.resolve_path(request.path_params["path"])
        if file_path is None:
            return PlainTextResponse("Not found", status_code=404)

        try:
            content = await asyncio.to_thread(file_path.read_bytes)
        except OSError as exc:
            log.error(f"Cannot read {file_path}: {exc}")
            return PlainTextResponse("Server error", status_code=500)

        if file_path.suffix.lower() in _HTML_SUFFIXES:
            html = content.decode("utf-8", errors="replace")
            return HTMLResponse(inject_reload_script(html, self._reload_path))

        media_type, _ = mimetypes.guess_type(file_path.name)
        return Response(content, media_type=media_type or "application/octet-stream")

    def resolve_path(self, url_path: str) -> Path | None:
        """Map a request path to a file under the output root.

        Directories map to their ``index.html``.  Returns None for missing
        files and for paths that would leave the output root.
        """
        root = self._out.resolve()
        candidate = (root / url_path.lstrip("/")).resolve()
        if not candidate.is_relative_to(root):
            return None
        if candidate.is_dir():
            candidate = candidate / "index.html"
        if not candidate.is_file():
            return None
        return candidate
