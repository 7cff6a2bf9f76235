"""In-process change notifications, fanned out to listeners and websocket clients."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field
from threading import Lock

from anyio import from_thread
from fastapi import WebSocket

logger = logging.getLogger(__name__)

ALL_TABLES = "*"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str  # insert | upsert | update | delete | copy
    record_id: str | None = None
    payload: dict = field(default_factory=dict)

    def to_message(self) -> dict:
        return {"event": "change", **asdict(self)}


ChangeListener = Callable[[ChangeEvent], None]


class ChangeFeed:
    """Fan-out of table change notifications.

    In-process listeners are called synchronously in publish order. Websocket
    subscribers receive the same events grouped by table name; a socket
    subscribed to ``*`` receives every table.
    """

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []
        self._listeners_lock = Lock()
        self._connections: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener %r failed for %s/%s", listener, event.table, event.action)

        if not self._connections:
            return
        try:
            from_thread.run(self.broadcast, event)
        except RuntimeError:
            # Not running inside an anyio worker thread (scripts, unit tests).
            logger.debug("No event loop available to push %s change to websockets", event.table)

    async def connect(self, websocket: WebSocket, tables: Iterable[str]) -> None:
        await websocket.accept()
        async with self._lock:
            for table in tables or (ALL_TABLES,):
                self._connections[table].add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            for table in list(self._connections):
                sockets = self._connections[table]
                sockets.discard(websocket)
                if not sockets:
                    self._connections.pop(table, None)

    async def broadcast(self, event: ChangeEvent) -> None:
        async with self._lock:
            sockets = set(self._connections.get(event.table, set())) | set(self._connections.get(ALL_TABLES, set()))

        if not sockets:
            return

        stale: list[WebSocket] = []
        message = event.to_message()
        for websocket in sockets:
            try:
                await websocket.send_json(message)
            except Exception:  # pragma: no cover - network/runtime dependent
                stale.append(websocket)

        for socket in stale:
            await self.disconnect(socket)
        if stale:
            logger.debug("Removed %d stale change-feed websocket(s)", len(stale))


change_feed = ChangeFeed()
