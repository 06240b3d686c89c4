"""Change-event hub: tells connected clients which read caches to drop.

Events are a UX aid. Delivery is best effort and nothing depends on it for
consistency.
"""

from __future__ import annotations

import inspect
import logging
from typing import Callable

from fastapi import WebSocket

from app.schemas.events import ChangeEvent
from app.services.auth import AuthContext

logger = logging.getLogger(__name__)

CACHE_KEYS = ("assets", "issues", "courses", "locations", "users")

Listener = Callable[[ChangeEvent], object]


class ChangeHub:
    def __init__(self):
        self._connections: list[tuple[WebSocket, AuthContext]] = []
        self._listeners: list[Listener] = []

    async def connect(self, websocket: WebSocket, auth: AuthContext):
        await websocket.accept()
        self._connections.append((websocket, auth))

    def disconnect(self, websocket: WebSocket):
        self._connections = [(ws, a) for ws, a in self._connections if ws is not websocket]

    async def drop_user(self, user_id: str, reason: str = "Access changed"):
        """Close a user's sockets; clients reconnect with their current scope."""
        targets = [ws for ws, auth in self._connections if auth.user_id == user_id]
        self._connections = [(ws, a) for ws, a in self._connections if a.user_id != user_id]
        for ws in targets:
            try:
                await ws.close(code=4001, reason=reason)
            except Exception:
                logger.debug("Socket for user %s was already closed", user_id)
        if targets:
            logger.info("Dropped change sockets", extra={"user_id": user_id, "count": len(targets)})

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register an in-process listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @staticmethod
    def _should_receive(auth: AuthContext, event: ChangeEvent) -> bool:
        if auth.is_admin:
            return True
        if event.course_id is None:
            return False
        return event.course_id == auth.course_id

    async def _notify_listeners(self, event: ChangeEvent):
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Change listener failed for event %s", event.event)

    async def _send(self, targets: list[WebSocket], event: ChangeEvent):
        dead = []
        payload = event.model_dump_json()
        for ws in targets:
            try:
                await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws)

    async def publish_invalidation(self, keys: list[str], course_id: str | None = None):
        """Broadcast which cache keys changed. Course users only hear about their course."""
        unknown = set(keys) - set(CACHE_KEYS)
        if unknown:
            raise ValueError(f"Unknown cache keys: {sorted(unknown)}")
        event = ChangeEvent(event="invalidate", keys=list(keys), course_id=course_id)
        await self._notify_listeners(event)
        await self._send(
            [ws for ws, auth in self._connections if self._should_receive(auth, event)],
            event,
        )

    async def publish_auth(self, user_id: str, state: str):
        """Sign-in / sign-out notification for the user's own connections."""
        event = ChangeEvent(event="auth", data={"user_id": user_id, "state": state})
        await self._notify_listeners(event)
        await self._send(
            [ws for ws, auth in self._connections if auth.user_id == user_id],
            event,
        )


change_hub = ChangeHub()
