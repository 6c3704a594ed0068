"""Rebuild coordinator — at most one rebuild in flight, one queued behind it.

States: idle -> rebuilding -> idle.

A change arriving while a rebuild runs is stored in a single pending slot
instead of starting a second rebuild.  When the running rebuild finishes,
the pending one runs straight away, so the last change is never lost.
Several different paths landing in the slot widen it to a full rebuild
(``None``); repeats of the same path stay a single-path rebuild.

A rebuild that raises is logged and recorded; the coordinator always
returns to idle and no reload is broadcast for it.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import TYPE_CHECKING, Final, Literal

from tabby import log

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabby._types import RebuildCallback
    from tabby.observability.collector import StackCollector


class _Empty:
    pass


_EMPTY: Final = _Empty()


def merge_pending(pending: Path | None | _Empty, changed: Path | None) -> Path | None:
    """Combine a queued rebuild target with a new one."""
    if isinstance(pending, _Empty):
        return changed
    if pending == changed:
        return pending
    return None


class RebuildCoordinator:
    """Serialises rebuilds triggered by file changes.

    Args:
        rebuild: Async callback receiving the changed path (None = everything).
        on_complete: Called after each successful rebuild; returns the number
            of clients notified (the broadcaster's ``broadcast``).
        collector: Optional observability collector.

    """

    def __init__(
        self,
        rebuild: RebuildCallback,
        *,
        on_complete: Callable[[], int] | None = None,
        collector: StackCollector | None = None,
    ) -> None:
        self._rebuild = rebuild
        self._on_complete = on_complete
        self._collector = collector
        self._busy = False
        self._pending: Path | None | _Empty = _EMPTY
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def state(self) -> Literal["idle", "rebuilding"]:
        return "rebuilding" if self._busy else "idle"

    @property
    def has_pending(self) -> bool:
        return not isinstance(self._pending, _Empty)

    async def trigger(self, changed: Path | None = None) -> None:
        """Rebuild for *changed*, or queue it if a rebuild is already running.

        Returns once this call's rebuild (and any rebuild queued behind it)
        has finished, or immediately if the change was queued.
        """
        if self._busy:
            self._pending = merge_pending(self._pending, changed)
            return

        self._busy = True
        self._idle.clear()
        try:
            target: Path | None = changed
            while True:
                await self._run(target)
                if isinstance(self._pending, _Empty):
                    break
                target = self._pending
                self._pending = _EMPTY
        finally:
            self._busy = False
            self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until no rebuild is running."""
        await self._idle.wait()

    async def _run(self, changed: Path | None) -> None:
        t0 = time.perf_counter()
        trigger = str(changed) if changed is not None else ""
        if changed is not None:
            log.info(f"File changed: {log.muted(_display(changed))}")

        try:
            await self._rebuild(changed)
        except Exception as exc:
            log.error(f"Build error: {exc}")
            self._record(trigger, ok=False, clients=0, t0=t0)
            return

        clients = self._on_complete() if self._on_complete is not None else 0
        self._record(trigger, ok=True, clients=clients, t0=t0)

    def _record(self, trigger: str, *, ok: bool, clients: int, t0: float) -> None:
        if self._collector is None:
            return
        self._collector.record_reload(
            trigger,
            ok=ok,
            clients_notified=clients,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )


def _display(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)
