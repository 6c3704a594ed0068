"""Event model for build and reload observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Build pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """A build action happened for one source file or asset tree.

    Attributes:
        kind: The type of build action.
        source: Source path relative to the source root.
        target: Output path (or the reason, for skips and errors).
        duration_ms: Time taken in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["render", "copy_asset", "skip", "error"]
    source: str
    target: str
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Dev server events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReloadEvent:
    """A dev-server rebuild finished.

    Attributes:
        trigger_path: Changed file that started the rebuild ("" for a full rebuild).
        ok: False if the rebuild callback raised.
        clients_notified: Number of browsers sent a reload (0 when not ok).
        duration_ms: Time from rebuild start to broadcast completion.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    ok: bool
    clients_notified: int
    duration_ms: float
    timestamp_ns: int


type StackEvent = BuildEvent | ReloadEvent


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
