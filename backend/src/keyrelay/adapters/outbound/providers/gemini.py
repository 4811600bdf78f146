"""Gemini / Imagen HTTP adapter — single-key calls, no retry logic.

Each method is one POST under one API key.  Rotation across keys is the
``KeyRotatingInvoker``'s job; anything raised here counts as that key's
failure.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from keyrelay.adapters.outbound.providers.responses import (
    GeminiSpeechAdapter,
    GeminiTextAdapter,
    ImagenAdapter,
)
from keyrelay.domain.exceptions import AttemptFailure
from keyrelay.ports.outbound import GenerativeProviderPort, ResponseAdapter
from keyrelay.shared.providers.types import ProviderConfig

logger = structlog.get_logger(__name__)


# ── Request templating ───────────────────────────────────────
def build_text_payload(prompt: str, *, system: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    if system:
        body["systemInstruction"] = {"parts": [{"text": system}]}
    return body


def build_image_payload(prompt: str, *, sample_count: int = 1) -> dict[str, Any]:
    return {
        "instances": [{"prompt": prompt}],
        "parameters": {"sampleCount": sample_count},
    }


def build_speech_payload(text: str, *, voice: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": text}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}},
            },
        },
    }


class GeminiProviderAdapter(GenerativeProviderPort):
    """Gemini text, Imagen image and Gemini TTS over one shared client."""

    def __init__(self, config: ProviderConfig, client: httpx.AsyncClient) -> None:
        self._config = config
        self._client = client
        self._text = GeminiTextAdapter()
        self._image = ImagenAdapter()
        self._speech = GeminiSpeechAdapter()

    @property
    def provider_id(self) -> str:
        return self._config.provider_id

    async def generate_text(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]:
        model = self._config.metadata["text_model"]
        return await self._post(f"{model}:generateContent", api_key, payload, self._text)

    async def generate_image(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]:
        model = self._config.metadata["image_model"]
        return await self._post(f"{model}:predict", api_key, payload, self._image)

    async def synthesize_speech(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]:
        model = self._config.metadata["tts_model"]
        return await self._post(f"{model}:generateContent", api_key, payload, self._speech)

    async def _post(
        self,
        method: str,
        api_key: str,
        payload: dict[str, Any],
        adapter: ResponseAdapter,
    ) -> dict[str, Any]:
        url = f"{self._config.base_url.rstrip('/')}/models/{method}"
        try:
            response = await self._client.post(
                url,
                params={"key": api_key},
                headers={"Content-Type": "application/json"},
                json=payload,
            )
        except httpx.TransportError as exc:
            # Message only; httpx errors can carry the keyed URL.
            raise AttemptFailure(
                self.provider_id, f"Transport error: {type(exc).__name__}"
            ) from None
        if not response.is_success:
            raise AttemptFailure(
                self.provider_id,
                f"API Error: {response.status_code} {response.reason_phrase}".rstrip(),
                status_code=response.status_code,
            )
        return adapter.extract(response.json())
