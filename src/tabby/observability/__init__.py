"""Observability — build and reload events in a bounded, queryable log.

Quick Start:
    >>> from tabby.observability import StackCollector, EventLog
    >>> collector = StackCollector(EventLog())
    >>> # pass to build_pages(collector=...) and DevServer(collector=...)

"""

from tabby.observability.collector import StackCollector
from tabby.observability.events import BuildEvent, ReloadEvent, StackEvent, now_ns
from tabby.observability.log import EventLog

__all__ = [
    "BuildEvent",
    "EventLog",
    "ReloadEvent",
    "StackCollector",
    "StackEvent",
    "now_ns",
]
