import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from stream_transcribe.config import TranscribeConfig
from stream_transcribe.log_format import configure_logging

ENV_FILE_PATH = Path.home() / ".config" / "stream-transcribe" / "env"

logger = logging.getLogger(__name__)


def _load_env_file(path: Path | None = None) -> None:
    path = path or ENV_FILE_PATH
    if not path.exists():
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key not in os.environ:
                os.environ[key] = value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stream-transcribe",
        description="Streaming speech-to-text client with email and download helpers",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    transcribe_parser = subparsers.add_parser("transcribe", help="Transcribe an audio file")
    transcribe_parser.add_argument("audio", help="Path to a FLAC audio file")
    transcribe_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    download_parser = subparsers.add_parser("download", help="Download a file from a URL")
    download_parser.add_argument("url", help="URL to fetch")
    download_parser.add_argument("--dest", help="Destination directory")

    email_parser = subparsers.add_parser("email", help="Send an email over SMTP")
    email_parser.add_argument("--to", action="append", required=True, help="Recipient (repeatable)")
    email_parser.add_argument("--subject", required=True)
    email_parser.add_argument("--body", required=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    _load_env_file()
    args = build_parser().parse_args(argv)

    config = TranscribeConfig()
    configure_logging(verbose=args.verbose, log_file=config.log_file)

    from stream_transcribe.adapters.http_download import DownloadError
    from stream_transcribe.adapters.smtp_mail import EmailDeliveryError
    from stream_transcribe.errors import TranscriptionError

    try:
        if args.command == "transcribe":
            asyncio.run(_run_transcribe(args, config))
        elif args.command == "download":
            asyncio.run(_run_download(args, config))
        elif args.command == "email":
            _run_email(args, config)
    except (TranscriptionError, DownloadError, EmailDeliveryError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


async def _run_transcribe(args: argparse.Namespace, config: TranscribeConfig) -> None:
    from stream_transcribe.domain.result import get_transcript
    from stream_transcribe.domain.session import RecognitionOptions
    from stream_transcribe.transcription import transcribe

    if not config.username:
        raise ValueError("No username configured (set STREAM_TRANSCRIBE_USERNAME)")

    result = await transcribe(
        args.audio,
        config.username,
        config.read_secret(config.password_file),
        endpoint_url=config.endpoint_url,
        options=RecognitionOptions(content_type=config.content_type),
        chunk_size=config.chunk_size,
        heartbeat_interval=config.heartbeat_interval_seconds,
    )

    transcript = get_transcript(result)
    logger.info("Transcript: %s", transcript)
    if args.json:
        print(json.dumps(result.to_payload(), indent=2))
    else:
        print(transcript)


async def _run_download(args: argparse.Namespace, config: TranscribeConfig) -> None:
    from stream_transcribe.adapters.http_download import download_file

    path = await download_file(args.url, dest_dir=args.dest or config.download_dir)
    print(path)


def _run_email(args: argparse.Namespace, config: TranscribeConfig) -> None:
    from stream_transcribe.adapters.smtp_mail import send_email

    if not config.smtp_username:
        raise ValueError("No SMTP username configured (set STREAM_TRANSCRIBE_SMTP_USERNAME)")

    send_email(
        config.smtp_username,
        config.read_secret(config.smtp_password_file),
        config.smtp_host,
        config.smtp_port,
        args.to,
        args.subject,
        args.body,
    )
