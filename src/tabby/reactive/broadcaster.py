"""Reload broadcaster — pushes reload signals to connected browsers.

One broadcaster is owned by one dev server.  Each open event stream is a
:class:`ReloadClient` with its own queue; a broadcast puts the message on
every queue and each client's stream generator picks it up.
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

RELOAD_MESSAGE = "reload"


@dataclass(frozen=True, slots=True)
class ReloadClient:
    """A connected live-reload client.

    Attributes:
        client_id: Unique identifier for this connection.
        queue: Messages waiting to be written to the client's stream.

    """

    client_id: str
    queue: asyncio.Queue[str] = field(default_factory=asyncio.Queue, compare=False, hash=False)


class ReloadBroadcaster:
    """Registry of live-reload connections.

    ``connect`` and ``disconnect`` change membership; ``broadcast`` iterates
    a snapshot.  The client set is guarded by a lock so membership changes
    made off the event loop cannot corrupt an in-progress broadcast.

    """

    def __init__(self) -> None:
        self._clients: set[ReloadClient] = set()
        self._lock = threading.Lock()

    @property
    def client_count(self) -> int:
        """Number of open live-reload connections."""
        with self._lock:
            return len(self._clients)

    def connect(self) -> ReloadClient:
        """Register a new client and return it."""
        client = ReloadClient(client_id=str(uuid.uuid4()))
        with self._lock:
            self._clients.add(client)
        return client

    def disconnect(self, client: ReloadClient) -> None:
        """Remove a client.  Unknown clients are ignored."""
        with self._lock:
            self._clients.discard(client)

    def broadcast(self, message: str = RELOAD_MESSAGE) -> int:
        """Queue *message* for every connected client.

        Must be called from the event loop that owns the client queues.

        Returns:
            Number of clients notified.

        """
        with self._lock:
            clients = frozenset(self._clients)

        for client in clients:
            client.queue.put_nowait(message)
        return len(clients)

    async def listen(self, client: ReloadClient) -> AsyncIterator[str]:
        """Yield messages queued for *client* as they arrive."""
        while True:
            yield await client.queue.get()
