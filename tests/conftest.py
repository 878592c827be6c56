import asyncio
from pathlib import Path
from typing import Any

import pytest

from stream_transcribe.errors import SessionConnectionError, StreamError


def _result_message(*transcripts: str, result_index: int = 0, final: bool = True) -> dict:
    return {
        "result_index": result_index,
        "results": [
            {"final": final, "alternatives": [{"transcript": text}]}
            for text in transcripts
        ],
    }


def _empty_message(result_index: int = 0) -> dict:
    return {"result_index": result_index, "results": []}


class FakeStreamConnection:
    def __init__(
        self,
        inbound: list[Any] | None = None,
        receive_delay: float = 0.0,
        fail_json_sends: bool = False,
        fail_bytes_after: int | None = None,
    ) -> None:
        self._inbound = list(inbound or [])
        self._receive_delay = receive_delay
        self._fail_json_sends = fail_json_sends
        self._fail_bytes_after = fail_bytes_after
        self.sent_json: list[dict] = []
        self.sent_bytes: list[bytes] = []
        self.heartbeat_times: list[float] = []
        self.receive_count = 0
        self.closed = False

    @property
    def heartbeats(self) -> int:
        return len(self.heartbeat_times)

    @property
    def data_frames(self) -> list[bytes]:
        return [frame for frame in self.sent_bytes if frame]

    async def send_json(self, message: dict) -> None:
        if self._fail_json_sends or self.closed:
            raise StreamError("send failed")
        self.sent_json.append(message)
        if message == {"action": "no-op"}:
            self.heartbeat_times.append(asyncio.get_running_loop().time())

    async def send_bytes(self, data: bytes) -> None:
        if self._fail_bytes_after is not None and len(self.sent_bytes) >= self._fail_bytes_after:
            raise StreamError("send failed")
        self.sent_bytes.append(data)

    async def receive_json(self) -> Any:
        await asyncio.sleep(self._receive_delay)
        if not self._inbound:
            raise SessionConnectionError("connection closed")
        item = self._inbound.pop(0)
        self.receive_count += 1
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


class FakeConnector:
    def __init__(self, connection: FakeStreamConnection | None = None, error: Exception | None = None) -> None:
        self.connection = connection or FakeStreamConnection()
        self.error = error
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def __call__(self, url: str, headers: dict[str, str]) -> FakeStreamConnection:
        self.calls.append((url, headers))
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def make_connection():
    return FakeStreamConnection


@pytest.fixture
def make_connector():
    return FakeConnector


@pytest.fixture
def audio_file(tmp_path: Path):
    def _create(size: int, name: str = "audio.flac") -> Path:
        path = tmp_path / name
        path.write_bytes(bytes(i % 251 for i in range(size)))
        return path

    return _create


@pytest.fixture
def result_message():
    return _result_message


@pytest.fixture
def empty_message():
    return _empty_message
