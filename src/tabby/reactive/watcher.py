"""Source watcher — async stream of file changes under the source root.

Wraps ``watchfiles.awatch``.  Hidden files and directories (any path
segment below the source root starting with ``.``) are ignored, as are
the editor and tooling files watchfiles' ``DefaultFilter`` already skips.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, DefaultFilter, awatch

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


class SourceFilter(DefaultFilter):
    """DefaultFilter that also drops dotfiles below *root*."""

    def __init__(self, root: Path) -> None:
        super().__init__()
        self._root = root

    def __call__(self, change: Change, path: str) -> bool:
        try:
            rel = Path(path).relative_to(self._root)
        except ValueError:
            return False
        if any(part.startswith(".") for part in rel.parts):
            return False
        return super().__call__(change, path)


class SourceWatcher:
    """Watches the source root and yields :class:`ChangeEvent` objects.

    Args:
        src_path: Directory to watch (recursively).
        debounce: Milliseconds to group rapid changes into one batch.

    """

    def __init__(self, src_path: Path, *, debounce: int = 200) -> None:
        self._src = src_path.resolve()
        self._debounce = debounce
        self._stop_event = asyncio.Event()

    def stop(self) -> None:
        """Make :meth:`changes` return after its current wait."""
        self._stop_event.set()

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Yield changes until :meth:`stop` is called."""
        async for batch in awatch(
            self._src,
            watch_filter=SourceFilter(self._src),
            stop_event=self._stop_event,
            debounce=self._debounce,
            step=50,
        ):
            for change_type, path_str in sorted(batch):
                kind = _CHANGE_KIND_MAP.get(change_type, "modified")
                yield ChangeEvent(path=Path(path_str), kind=kind)
