class TranscriptionError(Exception):
    pass


class SessionConnectionError(TranscriptionError, ConnectionError):
    """The connection could not be opened, was rejected, or dropped mid-session."""


class FileAccessError(TranscriptionError, OSError):
    """The local audio file could not be opened or read."""


class StreamError(TranscriptionError):
    """Sending a frame over the connection failed."""


class DecodeError(TranscriptionError, ValueError):
    """An inbound message does not match the expected result shape."""
