"""Provider adapters — Gemini (rotated key pool) and VoiceRSS (single key).

Each provider-specific HTTP call is a pure single-key function.  Key
rotation lives in ``KeyRotatingInvoker``; nothing here retries.
"""

from __future__ import annotations

from keyrelay.adapters.outbound.providers.gemini import (
    GeminiProviderAdapter,
    build_image_payload,
    build_speech_payload,
    build_text_payload,
)
from keyrelay.adapters.outbound.providers.responses import (
    GeminiSpeechAdapter,
    GeminiTextAdapter,
    ImagenAdapter,
)
from keyrelay.adapters.outbound.providers.voicerss import VoiceRSSAdapter
from keyrelay.config import Settings
from keyrelay.shared.providers.types import ProviderConfig

GEMINI = "gemini"
VOICERSS = "voicerss"


def build_provider_configs(settings: Settings) -> dict[str, ProviderConfig]:
    """Build ProviderConfig per provider from settings values.

    Keys stay as the raw delimited string; pools are parsed per request so
    a bad value surfaces as a request error rather than a startup crash.
    """
    return {
        GEMINI: ProviderConfig(
            provider_id=GEMINI,
            raw_keys=settings.gemini_api_keys,
            delimiter=settings.key_delimiter,
            base_url=settings.gemini_base_url,
            metadata={
                "text_model": settings.gemini_text_model,
                "image_model": settings.gemini_image_model,
                "tts_model": settings.gemini_tts_model,
                "voice": settings.gemini_tts_voice,
            },
        ),
        VOICERSS: ProviderConfig(
            provider_id=VOICERSS,
            raw_keys=settings.voicerss_api_key,
            base_url=settings.voicerss_base_url,
            metadata={
                "language": settings.voicerss_language,
                "voice": settings.voicerss_voice,
                "rate": settings.voicerss_rate,
                "codec": settings.voicerss_codec,
                "format": settings.voicerss_format,
            },
        ),
    }


__all__ = [
    "GEMINI",
    "VOICERSS",
    "GeminiProviderAdapter",
    "GeminiSpeechAdapter",
    "GeminiTextAdapter",
    "ImagenAdapter",
    "VoiceRSSAdapter",
    "build_image_payload",
    "build_provider_configs",
    "build_speech_payload",
    "build_text_payload",
]
