import json
import logging
from typing import Any

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from stream_transcribe.errors import DecodeError, SessionConnectionError, StreamError

logger = logging.getLogger(__name__)


class WebsocketConnection:
    def __init__(self, websocket: ClientConnection) -> None:
        self._websocket = websocket

    async def send_json(self, message: dict[str, Any]) -> None:
        await self._send(json.dumps(message))

    async def send_bytes(self, data: bytes) -> None:
        await self._send(bytes(data))

    async def receive_json(self) -> Any:
        try:
            raw = await self._websocket.recv()
        except ConnectionClosed as exc:
            raise SessionConnectionError(f"Connection closed while waiting for results: {exc}") from exc

        if isinstance(raw, bytes):
            raise DecodeError(f"Expected a JSON text message, got {len(raw)} binary bytes")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Invalid JSON message: {exc}") from exc

    async def close(self) -> None:
        await self._websocket.close()

    async def _send(self, message: str | bytes) -> None:
        try:
            await self._websocket.send(message)
        except (ConnectionClosed, OSError) as exc:
            raise StreamError(f"Failed to send frame: {exc}") from exc


async def open_websocket_connection(
    url: str,
    headers: dict[str, str],
    open_timeout: float | None = 10.0,
) -> WebsocketConnection:
    try:
        websocket = await connect(url, additional_headers=headers, open_timeout=open_timeout)
    except (WebSocketException, OSError, TimeoutError) as exc:
        raise SessionConnectionError(f"Could not connect to {url}: {exc}") from exc
    logger.info("Connected to %s", url.split("?", 1)[0])
    return WebsocketConnection(websocket)
