import base64
import logging
from pathlib import Path

from stream_transcribe.adapters.websocket_stream import open_websocket_connection
from stream_transcribe.domain.result import TranscriptionResult
from stream_transcribe.domain.session import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HEARTBEAT_INTERVAL_SECONDS,
    RecognitionOptions,
    TranscriptionSession,
)
from stream_transcribe.ports.connection import StreamConnector

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_URL = (
    "wss://stream.watsonplatform.net/speech-to-text/api/v1/recognize"
    "?model=en-US_BroadbandModel"
)


def basic_auth(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


async def transcribe(
    audio_path: str | Path,
    username: str,
    password: str,
    *,
    endpoint_url: str = DEFAULT_ENDPOINT_URL,
    options: RecognitionOptions | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL_SECONDS,
    connect: StreamConnector = open_websocket_connection,
) -> TranscriptionResult:
    """Stream an audio file to the recognition endpoint and return the first non-empty result.

    Raises SessionConnectionError, FileAccessError, StreamError or DecodeError;
    the connection is closed and the heartbeat stopped in every case.
    """
    logger.info("Transcribing %s", audio_path)
    connection = await connect(endpoint_url, {"Authorization": basic_auth(username, password)})

    try:
        session = TranscriptionSession(
            connection,
            chunk_size=chunk_size,
            heartbeat_interval=heartbeat_interval,
        )
    except ValueError:
        await connection.close()
        raise

    async with session:
        await session.start(options)
        await session.upload(audio_path)
        session.start_heartbeat()
        result = await session.read_result()

    logger.info("Transcription of %s finished with %d segments", audio_path, len(result.results))
    return result
