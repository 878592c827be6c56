from stream_transcribe.config import TranscribeConfig
from stream_transcribe.transcription import DEFAULT_ENDPOINT_URL


class TestTranscribeConfig:
    def test_defaults(self, monkeypatch):
        for key in ("ENDPOINT_URL", "CHUNK_SIZE", "HEARTBEAT_INTERVAL_SECONDS"):
            monkeypatch.delenv(f"STREAM_TRANSCRIBE_{key}", raising=False)
        config = TranscribeConfig()
        assert config.endpoint_url == DEFAULT_ENDPOINT_URL
        assert config.chunk_size == 2048
        assert config.heartbeat_interval_seconds == 5.0
        assert config.content_type == "audio/flac"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("STREAM_TRANSCRIBE_USERNAME", "apikey")
        monkeypatch.setenv("STREAM_TRANSCRIBE_SMTP_PORT", "2525")
        monkeypatch.setenv("STREAM_TRANSCRIBE_HEARTBEAT_INTERVAL_SECONDS", "2.5")
        config = TranscribeConfig()
        assert config.username == "apikey"
        assert config.smtp_port == 2525
        assert config.heartbeat_interval_seconds == 2.5

    def test_read_secret(self, tmp_path):
        secret = tmp_path / "password"
        secret.write_text("  hunter2\n")
        config = TranscribeConfig()
        assert config.read_secret(str(secret)) == "hunter2"

    def test_read_secret_missing_or_unset(self, tmp_path):
        config = TranscribeConfig()
        assert config.read_secret("") == ""
        assert config.read_secret(str(tmp_path / "nope")) == ""
