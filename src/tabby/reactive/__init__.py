"""Reactive layer — from a source change to a browser reload.

Watcher -> scope classification -> single-flight rebuild -> reload broadcast.
"""

from tabby.reactive.broadcaster import ReloadBroadcaster, ReloadClient
from tabby.reactive.hmr import inject_reload_script
from tabby.reactive.rebuild import RebuildCoordinator
from tabby.reactive.scope import RebuildScope, classify_change
from tabby.reactive.watcher import ChangeEvent, SourceWatcher

__all__ = [
    "ChangeEvent",
    "RebuildCoordinator",
    "RebuildScope",
    "ReloadBroadcaster",
    "ReloadClient",
    "SourceWatcher",
    "classify_change",
    "inject_reload_script",
]
