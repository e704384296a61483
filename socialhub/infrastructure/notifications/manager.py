"""Connection management helpers for notification websockets.

Notifications are produced on request threadpool workers, on the delivery
dispatcher and on APScheduler threads, none of which run inside an anyio
worker context. Sends are therefore handed to the event loop captured on
connect with ``asyncio.run_coroutine_threadsafe``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set
from uuid import UUID

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user."""

    def __init__(self) -> None:
        self._connections: DefaultDict[UUID, Set[WebSocket]] = defaultdict(set)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: Set[asyncio.Task[None]] = set()

    async def connect(self, user_id: UUID, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        self._connections[user_id].add(websocket)

    def disconnect(self, user_id: UUID, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``user_id``."""

        connections = self._connections.get(user_id)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(user_id, None)

    def is_connected(self, user_id: UUID) -> bool:
        return bool(self._connections.get(user_id))

    async def send_to_user(self, user_id: UUID, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection for ``user_id``."""

        connections = list(self._connections.get(user_id, set()))
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception:
                logger.debug("Dropping broken websocket for user %s", user_id, exc_info=True)
                self.disconnect(user_id, connection)

    def schedule_send(self, user_id: UUID, message: dict[str, Any]) -> bool:
        """Queue ``message`` on the websocket event loop from any thread.

        Returns ``False`` when the user has no open connection.
        """

        loop = self._loop
        if loop is None or loop.is_closed() or not self.is_connected(user_id):
            return False
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            task = loop.create_task(self.send_to_user(user_id, message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            asyncio.run_coroutine_threadsafe(self.send_to_user(user_id, message), loop)
        return True


__all__ = ["NotificationConnectionManager"]
