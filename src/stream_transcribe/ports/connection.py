from typing import Any, Protocol


class StreamConnection(Protocol):
    async def send_json(self, message: dict[str, Any]) -> None: ...
    async def send_bytes(self, data: bytes) -> None: ...
    async def receive_json(self) -> Any: ...
    async def close(self) -> None: ...


class StreamConnector(Protocol):
    async def __call__(self, url: str, headers: dict[str, str]) -> StreamConnection: ...
