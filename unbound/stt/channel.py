"""
Unbound Python SDK - Streaming Channels

A channel is the bidirectional pipe a transcription stream writes frames to
and reads transcript messages from. ``WebSocketChannel`` speaks JSON over a
WebSocket, with audio bytes base64-encoded, and is used when the platform
hands out a streaming URL. Host and port coordinates go over gRPC (see
``unbound.stt.grpc_channel``).
"""

from __future__ import annotations

import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Mapping

try:
    import websockets
    HAS_WEBSOCKETS = True
except ImportError:
    HAS_WEBSOCKETS = False

from unbound.exceptions import SttStreamError
from unbound.stt.models import SttSession

logger = logging.getLogger("unbound.stt")


class StreamChannel(ABC):
    """Bidirectional frame channel."""

    @abstractmethod
    async def send(self, frame: Dict[str, Any]) -> None:
        """Send one upstream frame."""

    @abstractmethod
    async def done_writing(self) -> None:
        """Close the upstream half; downstream messages may still arrive."""

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Mapping[str, Any]]:
        """Iterate downstream messages until the remote side closes."""

    @abstractmethod
    async def close(self) -> None:
        """Tear the channel down."""


Connector = Callable[[SttSession], Awaitable[StreamChannel]]


def encode_frame(frame: Mapping[str, Any]) -> str:
    """JSON-encode a frame, turning byte fields into base64 text."""
    payload: Dict[str, Any] = {}
    for key, value in frame.items():
        if isinstance(value, (bytes, bytearray, memoryview)):
            value = base64.b64encode(bytes(value)).decode("ascii")
        payload[key] = value
    return json.dumps(payload)


class WebSocketChannel(StreamChannel):
    """
    Channel backed by a ``websockets`` client connection.

    Example:
        >>> channel = await WebSocketChannel.connect(session)
        >>> await channel.send(frame)
    """

    def __init__(self, websocket: Any) -> None:
        self._websocket = websocket

    @classmethod
    async def connect(cls, session: SttSession, secure: bool = False) -> "WebSocketChannel":
        if not HAS_WEBSOCKETS:
            raise SttStreamError(
                "websockets package is required for streaming. "
                "Install it with: pip install unbound-sdk[async]",
                session_id=session.id,
            )

        if session.url:
            url = session.url
        elif session.host:
            scheme = "wss" if secure else "ws"
            url = f"{scheme}://{session.host}:{session.port}" if session.port else f"{scheme}://{session.host}"
        else:
            raise SttStreamError("Transcription session has no streaming endpoint", session_id=session.id)

        websocket = await websockets.connect(url, ping_interval=30, ping_timeout=10)
        logger.info(f"Connected to transcription stream: {url}")
        return cls(websocket)

    async def send(self, frame: Dict[str, Any]) -> None:
        await self._websocket.send(encode_frame(frame))

    async def done_writing(self) -> None:
        # The server closes the socket after it sees the last-chunk frame
        return None

    async def __aiter__(self) -> AsyncIterator[Mapping[str, Any]]:
        async for message in self._websocket:
            if isinstance(message, bytes):
                message = message.decode("utf-8")
            try:
                yield json.loads(message)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON message on transcription stream: {e}")

    async def close(self) -> None:
        await self._websocket.close()
