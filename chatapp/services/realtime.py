"""In-memory WebSocket channels used as refresh triggers.

Nothing sent over a channel is authoritative: payloads only tell a client which
query to re-fetch. Two channel families exist, one per conversation and one
per profile (notifications, conversation list).
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Iterable
from uuid import UUID

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

logger = logging.getLogger(__name__)


class ChannelManager:
    """Track WebSocket connections grouped by channel key and broadcast JSON payloads."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._channels: dict[str, set[WebSocket]] = {}
        self._connections: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, key: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._channels.setdefault(key, set()).add(websocket)
            self._connections[websocket] = key

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            key = self._connections.pop(websocket, None)
            if not key:
                return
            group = self._channels.get(key)
            if group is None:
                return
            group.discard(websocket)
            if not group:
                self._channels.pop(key, None)

    def subscriber_count(self, key: str) -> int:
        return len(self._channels.get(key, ()))

    async def broadcast(self, keys: str | Iterable[str], payload: dict[str, Any]) -> None:
        if isinstance(keys, str):
            target_keys = [keys]
        else:
            target_keys = [key for key in keys if key]
        if not target_keys:
            return
        serialized = json.dumps(payload, default=str)
        async with self._lock:
            targets: list[WebSocket] = []
            for key in target_keys:
                targets.extend(self._channels.get(key, ()))
        for connection in targets:
            try:
                await connection.send_text(serialized)
            except (RuntimeError, WebSocketDisconnect):
                logger.debug("Dropping closed %s socket", self.name)
                await self.disconnect(connection)

    def schedule(self, keys: str | UUID | Iterable[str | UUID], payload: dict[str, Any]) -> None:
        """Fire-and-forget broadcast from synchronous service code running on the event loop."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if isinstance(keys, (str, UUID)):
            keys = [keys]
        loop.create_task(self.broadcast([str(key) for key in keys], payload))


conversation_channels = ChannelManager("conversation")
profile_channels = ChannelManager("profile")


__all__ = ["ChannelManager", "conversation_channels", "profile_channels"]
