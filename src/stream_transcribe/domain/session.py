import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stream_transcribe.domain.result import TranscriptionResult
from stream_transcribe.errors import FileAccessError
from stream_transcribe.ports.connection import StreamConnection

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 2048
DEFAULT_HEARTBEAT_INTERVAL_SECONDS = 5.0

NO_OP_MESSAGE = {"action": "no-op"}


@dataclass(frozen=True)
class RecognitionOptions:
    content_type: str = "audio/flac"
    continuous: bool = True
    word_confidence: bool = True
    timestamps: bool = True
    profanity_filter: bool = False
    interim_results: bool = False
    # -1 disables the server-side inactivity timeout; the service still drops
    # connections idle for ~30s, which the heartbeat covers.
    inactivity_timeout: int = -1

    def to_start_message(self) -> dict[str, Any]:
        return {
            "action": "start",
            "content-type": self.content_type,
            "continuous": self.continuous,
            "word_confidence": self.word_confidence,
            "timestamps": self.timestamps,
            "profanity_filter": self.profanity_filter,
            "interim_results": self.interim_results,
            "inactivity_timeout": self.inactivity_timeout,
        }


class TranscriptionSession:
    """One streaming exchange over an already open connection.

    Use as an async context manager: leaving the block stops the heartbeat
    and closes the connection whether the exchange succeeded or not.
    """

    def __init__(
        self,
        connection: StreamConnection,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL_SECONDS,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if heartbeat_interval <= 0:
            raise ValueError(f"heartbeat_interval must be positive, got {heartbeat_interval}")
        self._connection = connection
        self._chunk_size = chunk_size
        self._heartbeat_interval = heartbeat_interval
        self._stop_heartbeat = asyncio.Event()
        self._heartbeat_task: asyncio.Task | None = None
        self._closed = False

    async def __aenter__(self) -> "TranscriptionSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat_task is not None and not self._heartbeat_task.done()

    async def start(self, options: RecognitionOptions | None = None) -> None:
        options = options or RecognitionOptions()
        await self._connection.send_json(options.to_start_message())
        logger.debug("Sent start message (content-type=%s)", options.content_type)

    async def upload(self, audio_path: str | Path) -> int:
        """Send the file as binary frames followed by the empty end-of-audio frame.

        Returns the number of data frames sent, not counting the terminator.
        """
        try:
            audio_file = open(audio_path, "rb")
        except OSError as exc:
            raise FileAccessError(f"Cannot open audio file {audio_path}: {exc}") from exc

        frames_sent = 0
        with audio_file:
            while True:
                try:
                    chunk = audio_file.read(self._chunk_size)
                except OSError as exc:
                    raise FileAccessError(f"Cannot read audio file {audio_path}: {exc}") from exc
                if not chunk:
                    break
                await self._connection.send_bytes(chunk)
                frames_sent += 1

        await self._connection.send_bytes(b"")
        logger.info("File uploaded: %s (%d frames)", audio_path, frames_sent)
        return frames_sent

    def start_heartbeat(self) -> None:
        if self.heartbeat_running:
            return
        self._stop_heartbeat.clear()
        self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def stop_heartbeat(self) -> None:
        self._stop_heartbeat.set()
        task = self._heartbeat_task
        self._heartbeat_task = None
        if task is None:
            return
        if not task.done():
            try:
                await asyncio.wait_for(task, timeout=self._heartbeat_interval)
            except asyncio.TimeoutError:
                logger.debug("Heartbeat did not stop in time, cancelled")

    async def read_result(self) -> TranscriptionResult:
        while True:
            payload = await self._connection.receive_json()
            result = TranscriptionResult.from_payload(payload)
            if result.is_terminal:
                logger.info(
                    "Received terminal result (result_index=%d, %d segments)",
                    result.result_index,
                    len(result.results),
                )
                return result
            logger.debug("Discarding result without segments (result_index=%d)", result.result_index)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self.stop_heartbeat()
        finally:
            await self._connection.close()
            logger.info("Transcription session closed")

    async def _heartbeat_loop(self) -> None:
        while not self._stop_heartbeat.is_set():
            try:
                await asyncio.wait_for(self._stop_heartbeat.wait(), timeout=self._heartbeat_interval)
                return
            except asyncio.TimeoutError:
                pass
            if self._stop_heartbeat.is_set():
                return
            try:
                await self._connection.send_json(NO_OP_MESSAGE)
            except Exception:
                # The read loop sees the same dead connection and reports it.
                logger.debug("Heartbeat send failed, stopping heartbeat", exc_info=True)
                return
            logger.debug("Heartbeat sent")
