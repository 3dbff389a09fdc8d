"""
In-memory WebSocket fan-out keyed by channel ("room:<id>", "tracking:<id>").
"""
import asyncio
import json
import logging
import uuid
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def room_channel(room_id: uuid.UUID) -> str:
    return f"room:{room_id}"


def tracking_channel(tracking_id: uuid.UUID) -> str:
    return f"tracking:{tracking_id}"


class ConnectionManager:
    """Tracks WebSocket connections per channel and broadcasts events."""

    def __init__(self) -> None:
        self._channels: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def subscribe(self, websocket: WebSocket, channel: str) -> None:
        async with self._lock:
            self._channels.setdefault(channel, set()).add(websocket)
        logger.debug("Subscribed ws to %s", channel)

    async def unsubscribe(self, websocket: WebSocket, channel: str) -> None:
        async with self._lock:
            sockets = self._channels.get(channel)
            if sockets is not None:
                sockets.discard(websocket)
                if not sockets:
                    del self._channels[channel]
        logger.debug("Unsubscribed ws from %s", channel)

    async def unsubscribe_all(self, websocket: WebSocket, channels: Set[str]) -> None:
        for channel in list(channels):
            await self.unsubscribe(websocket, channel)

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel) or ())

    async def broadcast(
        self,
        channel: str,
        event: str,
        payload: Any,
        exclude_websocket: Optional[WebSocket] = None,
    ) -> None:
        """Send a JSON event to every socket on the channel (except exclude_websocket)."""
        msg = json.dumps({
            "event": event,
            "channel": channel,
            "payload": payload,
        }, default=str)
        async with self._lock:
            sockets = set(self._channels.get(channel) or [])
        dead = []
        for ws in sockets:
            if ws is exclude_websocket:
                continue
            try:
                await ws.send_text(msg)
            except Exception as e:
                logger.warning("Broadcast send failed on %s: %s", channel, e)
                dead.append(ws)
        if dead:
            async with self._lock:
                for ws in dead:
                    if channel in self._channels:
                        self._channels[channel].discard(ws)
                if channel in self._channels and not self._channels[channel]:
                    del self._channels[channel]

    def broadcast_sync(self, channel: str, event: str, payload: Any) -> None:
        """Fire-and-forget broadcast from sync code. Needs a running loop; otherwise skipped."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; skipped %s on %s", event, channel)
            return
        loop.create_task(self.broadcast(channel, event, payload))


connection_manager = ConnectionManager()
