"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from livesense.config.settings import (
    GROQ_BASE_URL,
    AudioConfig,
    CaptureConfig,
    RecognizerConfig,
    Settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real API keys and .env files out of the tests."""
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Test configuration models and loading."""

    def test_default_settings(self) -> None:
        settings = Settings()
        assert settings.capture.interval == 8.0
        assert settings.capture.primary_capacity == 6
        assert settings.capture.secondary_capacity == 2
        assert settings.recognizer.backend == "whisper"
        assert settings.server.port == 3000

    def test_capture_directories(self) -> None:
        config = CaptureConfig(storage_dir="/data/live")
        assert config.primary_dir == Path("/data/live/screenshots")
        assert config.secondary_dir == Path("/data/live/extra_screenshots")

    def test_storage_dir_expands_home(self) -> None:
        assert "~" not in str(CaptureConfig().root)

    def test_audio_defaults(self) -> None:
        config = AudioConfig()
        assert config.sample_rate == 16000
        assert config.ffmpeg_path == "ffmpeg"

    def test_rejects_invalid_values(self) -> None:
        with pytest.raises(ValidationError):
            CaptureConfig(primary_capacity=0)
        with pytest.raises(ValidationError):
            CaptureConfig(interval=-1)
        with pytest.raises(ValidationError):
            RecognizerConfig(backend="vosk")

    def test_load_settings_missing_file(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.capture.interval == 8.0

    def test_load_settings_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "livesense.yaml"
        path.write_text(
            "capture:\n"
            "  interval: 4\n"
            "  storage_dir: /tmp/live\n"
            "recognizer:\n"
            "  backend: openai\n"
            "server:\n"
            "  port: 3100\n"
        )
        settings = load_settings(path)
        assert settings.capture.interval == 4.0
        assert settings.capture.root == Path("/tmp/live")
        assert settings.recognizer.backend == "openai"
        assert settings.server.port == 3100

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path).server.port == 3000

    def test_env_api_keys(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.openai_api_key.get_secret_value() == "sk-env"
        assert settings.cloud_credentials() == ("sk-env", None)

    def test_dotenv_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        # Registered so the value written by the .env loader is undone afterwards
        monkeypatch.setenv("GROQ_API_KEY", "")
        (tmp_path / ".env").write_text("# keys\nGROQ_API_KEY=gsk-dotenv\n")
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.groq_api_key.get_secret_value() == "gsk-dotenv"

    def test_groq_key_wins(self) -> None:
        settings = Settings(openai_api_key="sk-a", groq_api_key="gsk-b")
        assert settings.cloud_credentials() == ("gsk-b", GROQ_BASE_URL)

    def test_explicit_base_url_is_kept(self) -> None:
        settings = Settings(
            groq_api_key="gsk-b",
            recognizer=RecognizerConfig(base_url="http://proxy.local/v1"),
        )
        assert settings.cloud_credentials() == ("gsk-b", "http://proxy.local/v1")
