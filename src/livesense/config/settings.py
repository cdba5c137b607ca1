"""Configuration management for livesense.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (API keys). Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/livesense.yaml")
GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class CaptureConfig(BaseModel):
    storage_dir: str = Field(default="~/.livesense", description="Root for screenshot directories")
    primary_dirname: str = Field(default="screenshots")
    secondary_dirname: str = Field(default="extra_screenshots")
    interval: float = Field(default=8.0, gt=0, description="Seconds between live cycles")
    settle_delay: float = Field(default=0.1, ge=0, description="Wait after hiding the window")
    primary_capacity: int = Field(default=6, gt=0)
    secondary_capacity: int = Field(default=2, gt=0)
    thumbnail_width: int = Field(default=32, gt=0)
    monitor: int = Field(default=1, ge=0, description="mss monitor index (0 = all monitors)")

    @property
    def root(self) -> Path:
        return Path(self.storage_dir).expanduser()

    @property
    def primary_dir(self) -> Path:
        return self.root / self.primary_dirname

    @property
    def secondary_dir(self) -> Path:
        return self.root / self.secondary_dirname


class AudioConfig(BaseModel):
    ffmpeg_path: str = Field(default="ffmpeg")
    sample_rate: int = Field(default=16000, gt=0)
    temp_dir: str | None = Field(default=None, description="Defaults to the system temp directory")


class RecognizerConfig(BaseModel):
    backend: Literal["whisper", "openai"] = Field(default="whisper")
    model: str = Field(default="tiny.en", description="Local faster-whisper model size")
    device: str = Field(default="cpu")
    compute_type: str = Field(default="int8")
    language: str | None = Field(default="en")
    base_url: str | None = Field(default=None)
    cloud_model: str = Field(default="whisper-large-v3-turbo")


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)
    client_timeout: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the livesense pipeline.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "LIVESENSE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # API Keys
    openai_api_key: SecretStr = Field(default=SecretStr(""))
    groq_api_key: SecretStr = Field(default=SecretStr(""))

    # Configuration sections
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    recognizer: RecognizerConfig = Field(default_factory=RecognizerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def cloud_credentials(self) -> tuple[str, str | None]:
        """Return the (api_key, base_url) pair for the cloud recognizer.

        A Groq key wins over an OpenAI key and implies the Groq base URL
        unless one was configured explicitly.
        """
        base_url = self.recognizer.base_url
        groq_key = self.groq_api_key.get_secret_value()
        if groq_key:
            return groq_key, base_url or GROQ_BASE_URL
        return self.openai_api_key.get_secret_value(), base_url


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    # Load .env file manually for non-prefixed vars
    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply environment variable overrides for non-prefixed vars."""
    groq_key = os.environ.get("GROQ_API_KEY", "")
    openai_key = os.environ.get("OPENAI_API_KEY", "")

    if groq_key:
        yaml_data["groq_api_key"] = groq_key
    if openai_key:
        yaml_data["openai_api_key"] = openai_key
