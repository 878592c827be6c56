"""Result records streamed back by the recognition service.

Each inbound message has the shape::

    {
        "result_index": 0,
        "results": [
            {
                "final": true,
                "alternatives": [
                    {
                        "transcript": "hello world ",
                        "confidence": 0.94,
                        "word_confidence": [["hello", 0.97], ["world", 0.91]],
                        "timestamps": [["hello", 0.12, 0.48], ["world", 0.48, 0.9]]
                    }
                ]
            }
        ]
    }

Messages with an empty ``results`` list are acknowledgements or unfinished
updates and carry no transcript.
"""

from dataclasses import dataclass, field
from typing import Any

from stream_transcribe.errors import DecodeError


@dataclass(frozen=True)
class WordConfidence:
    word: str
    confidence: float


@dataclass(frozen=True)
class WordTimestamp:
    word: str
    start: float
    end: float


@dataclass(frozen=True)
class Alternative:
    transcript: str = ""
    confidence: float | None = None
    word_confidence: list[WordConfidence] = field(default_factory=list)
    timestamps: list[WordTimestamp] = field(default_factory=list)


@dataclass(frozen=True)
class ResultSegment:
    alternatives: list[Alternative] = field(default_factory=list)
    final: bool = False


@dataclass(frozen=True)
class TranscriptionResult:
    result_index: int = 0
    results: list[ResultSegment] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return len(self.results) > 0

    @classmethod
    def from_payload(cls, payload: Any) -> "TranscriptionResult":
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")

        result_index = payload.get("result_index", 0)
        if not _is_int(result_index):
            raise DecodeError(f"result_index must be an integer, got {result_index!r}")

        segments = [_parse_segment(raw) for raw in _as_list(payload, "results")]
        return cls(result_index=result_index, results=segments)

    def to_payload(self) -> dict[str, Any]:
        return {
            "result_index": self.result_index,
            "results": [
                {
                    "final": segment.final,
                    "alternatives": [_alternative_payload(alt) for alt in segment.alternatives],
                }
                for segment in self.results
            ],
        }


def _alternative_payload(alt: Alternative) -> dict[str, Any]:
    payload: dict[str, Any] = {"transcript": alt.transcript}
    if alt.confidence is not None:
        payload["confidence"] = alt.confidence
    payload["word_confidence"] = [[w.word, w.confidence] for w in alt.word_confidence]
    payload["timestamps"] = [[t.word, t.start, t.end] for t in alt.timestamps]
    return payload


def get_transcript(result: TranscriptionResult) -> str:
    return "".join(segment.alternatives[0].transcript for segment in result.results)


def _parse_segment(raw: Any) -> ResultSegment:
    if not isinstance(raw, dict):
        raise DecodeError(f"Result segment must be an object, got {raw!r}")
    final = raw.get("final", False)
    if not isinstance(final, bool):
        raise DecodeError(f"final must be a boolean, got {final!r}")
    alternatives = [_parse_alternative(alt) for alt in _as_list(raw, "alternatives")]
    return ResultSegment(alternatives=alternatives, final=final)


def _parse_alternative(raw: Any) -> Alternative:
    if not isinstance(raw, dict):
        raise DecodeError(f"Alternative must be an object, got {raw!r}")

    transcript = raw.get("transcript", "")
    if not isinstance(transcript, str):
        raise DecodeError(f"transcript must be a string, got {transcript!r}")

    confidence = raw.get("confidence")
    if confidence is not None and not _is_number(confidence):
        raise DecodeError(f"confidence must be a number, got {confidence!r}")

    word_confidence = []
    for entry in _as_list(raw, "word_confidence"):
        if not (isinstance(entry, list) and len(entry) == 2):
            raise DecodeError(f"word_confidence entry must be [word, confidence], got {entry!r}")
        word, score = entry
        if not isinstance(word, str) or not _is_number(score):
            raise DecodeError(f"Malformed word_confidence entry {entry!r}")
        word_confidence.append(WordConfidence(word=word, confidence=float(score)))

    timestamps = []
    for entry in _as_list(raw, "timestamps"):
        if not (isinstance(entry, list) and len(entry) == 3):
            raise DecodeError(f"timestamps entry must be [word, start, end], got {entry!r}")
        word, start, end = entry
        if not isinstance(word, str) or not _is_number(start) or not _is_number(end):
            raise DecodeError(f"Malformed timestamps entry {entry!r}")
        timestamps.append(WordTimestamp(word=word, start=float(start), end=float(end)))

    return Alternative(
        transcript=transcript,
        confidence=float(confidence) if confidence is not None else None,
        word_confidence=word_confidence,
        timestamps=timestamps,
    )


def _as_list(raw: dict, key: str) -> list:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"{key} must be a list, got {value!r}")
    return value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
