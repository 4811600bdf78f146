"""keyrelay — Application Configuration."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, enum.Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Centralised, validated configuration loaded from environment / .env file.

    Built once per process and handed to ``create_app``; request handling
    never reads ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────
    app_name: str = "keyrelay"
    app_env: Environment = Environment.DEVELOPMENT
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # ── Gemini (rotated pool) ────────────────────────────────
    # Comma-separated; parsed and shuffled per request.
    gemini_api_keys: str = ""
    key_delimiter: str = ","
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_text_model: str = "gemini-2.5-flash-preview-05-20"
    gemini_image_model: str = "imagen-3.0-generate-002"
    gemini_tts_model: str = "gemini-2.5-flash-preview-tts"
    gemini_tts_voice: str = "Kore"

    # ── VoiceRSS (single key, no rotation) ───────────────────
    voicerss_api_key: str = ""
    voicerss_base_url: str = "https://api.voicerss.org/"
    voicerss_language: str = "id-id"
    voicerss_voice: str = "Andika"
    voicerss_rate: str = "-2"
    voicerss_codec: str = "MP3"
    voicerss_format: str = "16khz_16bit_stereo"

    # ── Transport ────────────────────────────────────────────
    provider_timeout_seconds: float = 60.0

    # ── Observability ────────────────────────────────────────
    prometheus_enabled: bool = True

    # ── Derived helpers ──────────────────────────────────────
    @property
    def is_production(self) -> bool:
        return self.app_env == Environment.PRODUCTION

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("voicerss_api_key")
    @classmethod
    def _strip_voicerss_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("key_delimiter")
    @classmethod
    def _validate_delimiter(cls, v: str) -> str:
        if not v:
            raise ValueError("key_delimiter must not be empty")
        return v


def get_settings(**overrides: Any) -> Settings:
    """Factory that allows test-time overrides."""
    return Settings(**overrides)
