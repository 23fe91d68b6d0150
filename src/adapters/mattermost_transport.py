"""Mattermost websocket transport.

Implements the core TransportPort: one websocket, authenticated with the
session token, read one frame at a time by the consumer loop.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import aiohttp

from adapters.mattermost_mapper import build_event
from core.errors import TransportError
from core.models import Event

LOGGER = logging.getLogger(__name__)

_CLOSED_TYPES = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)


def websocket_url(base_url: str) -> str:
    return base_url.replace("https://", "wss://", 1).replace("http://", "ws://", 1) + "/api/v4/websocket"


class MattermostTransport:
    """Websocket event stream with an explicit connect/close lifecycle."""

    def __init__(self, base_url: str, token: str) -> None:
        self._url = websocket_url(base_url.rstrip("/"))
        self._token = token
        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._seq = 0

    async def connect(self) -> None:
        self._session = aiohttp.ClientSession()
        try:
            self._ws = await self._session.ws_connect(self._url, heartbeat=30.0)
        except (aiohttp.ClientError, OSError) as exc:
            await self._session.close()
            raise TransportError(f"Failed to connect to {self._url}: {exc}") from exc
        await self._send_action("authentication_challenge", {"token": self._token})
        LOGGER.info("Websocket connected to %s", self._url)

    async def _send_action(self, action: str, data: dict) -> None:
        if self._ws is None:
            raise TransportError("Websocket is not connected")
        self._seq += 1
        await self._ws.send_json({"seq": self._seq, "action": action, "data": data})

    async def receive(self) -> Optional[Event]:
        """Return the next event, or None once the socket closed."""

        if self._ws is None:
            raise TransportError("Websocket is not connected")
        while True:
            msg = await self._ws.receive()
            if msg.type in _CLOSED_TYPES:
                return None
            if msg.type == aiohttp.WSMsgType.ERROR:
                raise TransportError(f"Websocket error: {self._ws.exception()}")
            if msg.type != aiohttp.WSMsgType.TEXT:
                continue
            try:
                frame = json.loads(msg.data)
            except ValueError:
                LOGGER.warning("Skipping undecodable websocket frame")
                continue
            if not isinstance(frame, dict):
                continue
            event = build_event(frame)
            if event is None:
                LOGGER.debug("Websocket reply: %s", frame)
                continue
            return event

    async def close(self) -> None:
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        if self._session is not None and not self._session.closed:
            await self._session.close()
