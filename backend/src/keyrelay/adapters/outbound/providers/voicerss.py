"""VoiceRSS adapter — one fixed key, no rotation, no fallback."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from keyrelay.domain.exceptions import ConfigurationError, SpeechProviderError
from keyrelay.ports.outbound import SpeechSynthesisPort
from keyrelay.shared.providers.types import ProviderConfig

logger = structlog.get_logger(__name__)

_CODEC_MIME = {
    "MP3": "audio/mpeg",
    "WAV": "audio/wav",
    "AAC": "audio/aac",
    "OGG": "audio/ogg",
    "CAF": "audio/x-caf",
}


class VoiceRSSAdapter(SpeechSynthesisPort):
    def __init__(self, config: ProviderConfig, client: httpx.AsyncClient) -> None:
        self._config = config
        self._client = client

    @property
    def provider_id(self) -> str:
        return self._config.provider_id

    @property
    def mime_type(self) -> str:
        return _CODEC_MIME.get(self._config.metadata.get("codec", "MP3").upper(), "audio/mpeg")

    def build_url(self, text: str, *, base64: bool = False) -> str:
        return str(httpx.URL(self._config.base_url, params=self._params(text, base64=base64)))

    async def synthesize(self, text: str) -> dict[str, Any]:
        params = self._params(text, base64=True)
        try:
            response = await self._client.get(self._config.base_url, params=params)
        except httpx.TransportError as exc:
            logger.error("voicerss_transport_error", error=type(exc).__name__)
            raise SpeechProviderError(
                self.provider_id, f"Transport error: {type(exc).__name__}"
            ) from None

        body = response.text.strip()
        # VoiceRSS reports most failures as 200 with an "ERROR: ..." body.
        if not response.is_success or body.upper().startswith("ERROR"):
            detail = body or f"{response.status_code} {response.reason_phrase}"
            logger.error("voicerss_request_failed", status=response.status_code, error=detail)
            raise SpeechProviderError(self.provider_id, detail)

        if body.startswith("data:") and "," in body:
            body = body.split(",", 1)[1]
        return {"audio": body, "mimeType": self.mime_type}

    def _params(self, text: str, *, base64: bool) -> dict[str, str]:
        key = self._config.raw_keys.strip()
        if not key:
            raise ConfigurationError(
                f"No API key configured for provider {self.provider_id!r}",
                provider=self.provider_id,
            )
        meta = self._config.metadata
        params = {
            "key": key,
            "src": text,
            "hl": meta.get("language", "id-id"),
            "v": meta.get("voice", "Andika"),
            "r": meta.get("rate", "-2"),
            "c": meta.get("codec", "MP3"),
            "f": meta.get("format", "16khz_16bit_stereo"),
        }
        if base64:
            params["b64"] = "true"
        return params
