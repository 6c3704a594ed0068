"""Stack collector — the single recording surface for builds and reloads.

The builder records one ``BuildEvent`` per rendered page, skipped page,
failed page and copied asset tree; the dev server records one
``ReloadEvent`` per rebuild.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import Literal

from tabby.observability.events import BuildEvent, ReloadEvent, now_ns
from tabby.observability.log import EventLog


class StackCollector:
    """Unified event collector.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_build(
        self,
        kind: Literal["render", "copy_asset", "skip", "error"],
        source: str,
        target: str,
        *,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a build pipeline event."""
        self._log.append(
            BuildEvent(
                kind=kind,
                source=source,
                target=target,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_reload(
        self,
        trigger_path: str,
        *,
        ok: bool,
        clients_notified: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record the outcome of a dev-server rebuild."""
        self._log.append(
            ReloadEvent(
                trigger_path=trigger_path,
                ok=ok,
                clients_notified=clients_notified,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
