"""Per-provider response adapters.

Each adapter knows where one provider hides its result and either returns
a small shaped dict or raises ``UpstreamResponseError``.  The raw body is
echoed under ``raw`` so clients written against the provider format keep
working.
"""

from __future__ import annotations

from typing import Any

from keyrelay.domain.exceptions import UpstreamResponseError
from keyrelay.ports.outbound import ResponseAdapter


def _first_candidate_parts(provider: str, data: dict[str, Any]) -> list[dict[str, Any]]:
    candidates = data.get("candidates") or []
    if not candidates:
        raise UpstreamResponseError(provider, "response has no candidates")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        raise UpstreamResponseError(provider, "candidate has no content parts")
    return parts


class GeminiTextAdapter(ResponseAdapter):
    """``candidates[0].content.parts[*].text``"""

    provider = "gemini"

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        parts = _first_candidate_parts(self.provider, data)
        texts = [p["text"] for p in parts if isinstance(p.get("text"), str)]
        if not texts:
            raise UpstreamResponseError(self.provider, "candidate contains no text")
        return {"text": "".join(texts), "raw": data}


class ImagenAdapter(ResponseAdapter):
    """``predictions[0].bytesBase64Encoded``"""

    provider = "gemini"

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        predictions = data.get("predictions") or []
        image = predictions[0].get("bytesBase64Encoded") if predictions else None
        if not image:
            raise UpstreamResponseError(self.provider, "response contains no image bytes")
        return {
            "image": image,
            "mimeType": predictions[0].get("mimeType", "image/png"),
            "raw": data,
        }


class GeminiSpeechAdapter(ResponseAdapter):
    """``candidates[0].content.parts[*].inlineData.data``"""

    provider = "gemini"

    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        parts = _first_candidate_parts(self.provider, data)
        for part in parts:
            inline = part.get("inlineData") or {}
            if inline.get("data"):
                return {
                    "audio": inline["data"],
                    "mimeType": inline.get("mimeType", "audio/L16;rate=24000"),
                    "raw": data,
                }
        raise UpstreamResponseError(self.provider, "response contains no audio data")
