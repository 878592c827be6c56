from pydantic_settings import BaseSettings, SettingsConfigDict


class TranscribeConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STREAM_TRANSCRIBE_")

    endpoint_url: str = (
        "wss://stream.watsonplatform.net/speech-to-text/api/v1/recognize"
        "?model=en-US_BroadbandModel"
    )
    username: str = ""
    password_file: str = ""

    content_type: str = "audio/flac"
    chunk_size: int = 2048
    heartbeat_interval_seconds: float = 5.0

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password_file: str = ""

    download_dir: str = "."

    log_file: str = ""

    def read_secret(self, path: str) -> str:
        if not path:
            return ""
        try:
            with open(path) as f:
                return f.read().strip()
        except FileNotFoundError:
            return ""
