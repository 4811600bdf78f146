"""Generation Service.

Resolves the requested action, builds a fresh shuffled key pool for the
provider, wraps the provider call in a single-key closure and hands both to
the ``KeyRotatingInvoker``.  VoiceRSS calls bypass the invoker entirely.
"""

from __future__ import annotations

import random
from typing import Any

import structlog

from keyrelay.adapters.outbound.providers import (
    build_image_payload,
    build_speech_payload,
    build_text_payload,
)
from keyrelay.application.dtos import GenerateRequest
from keyrelay.domain.enums import Action, SpeechBackend
from keyrelay.domain.exceptions import InvalidRequestError
from keyrelay.ports.outbound import GenerativeProviderPort, SpeechSynthesisPort
from keyrelay.shared.observability.metrics import GENERATE_REQUESTS
from keyrelay.shared.providers.invoker import KeyRotatingInvoker
from keyrelay.shared.providers.key_pool import pool_for
from keyrelay.shared.providers.types import KeyedOperation, ProviderConfig

logger = structlog.get_logger(__name__)


class GenerationService:
    """Dispatch one generate request to the right provider call."""

    def __init__(
        self,
        *,
        gemini_config: ProviderConfig,
        gemini: GenerativeProviderPort,
        speech: SpeechSynthesisPort,
        rng: random.Random | None = None,
    ) -> None:
        self._gemini_config = gemini_config
        self._gemini = gemini
        self._speech = speech
        self._invoker = KeyRotatingInvoker(gemini_config.provider_id)
        self._rng = rng

    async def handle(self, request: GenerateRequest) -> dict[str, Any]:
        action = Action.parse(request.discriminator)
        if action is None:
            logger.warning("unknown_action", action=request.discriminator)
            GENERATE_REQUESTS.labels(action="unknown", status="rejected").inc()
            raise InvalidRequestError("Invalid request type")

        log = logger.bind(action=action.value)
        log.info("generate_request_received")
        try:
            if action is Action.TEXT:
                result = await self._text(request)
            elif action is Action.IMAGE:
                result = await self._image(request)
            elif action is Action.TTS:
                result = await self._tts(request)
            else:
                result = self._greeting(request)
        except Exception:
            GENERATE_REQUESTS.labels(action=action.value, status="failed").inc()
            raise

        GENERATE_REQUESTS.labels(action=action.value, status="ok").inc()
        return result

    # ── Actions ──────────────────────────────────────────────
    async def _text(self, request: GenerateRequest) -> dict[str, Any]:
        payload = request.payload
        if payload is None:
            prompt = _require(request.prompt, "prompt")
            payload = build_text_payload(prompt, system=request.system)
        return await self._rotate(lambda key: self._gemini.generate_text(key, payload))

    async def _image(self, request: GenerateRequest) -> dict[str, Any]:
        payload = request.payload
        if payload is None:
            payload = build_image_payload(_require(request.prompt, "prompt"))
        return await self._rotate(lambda key: self._gemini.generate_image(key, payload))

    async def _tts(self, request: GenerateRequest) -> dict[str, Any]:
        backend = _speech_backend(request.provider)
        if backend is SpeechBackend.VOICERSS:
            text = _require(request.speech_text, "text")
            return await self._speech.synthesize(text)

        payload = request.payload
        if payload is None or "contents" not in payload:
            text = _require(request.speech_text, "text")
            voice = request.voice or self._gemini_config.metadata.get("voice", "Kore")
            payload = build_speech_payload(text, voice=voice)
        return await self._rotate(lambda key: self._gemini.synthesize_speech(key, payload))

    def _greeting(self, request: GenerateRequest) -> dict[str, Any]:
        text = _require(request.speech_text, "text")
        return {"url": self._speech.build_url(text)}

    async def _rotate(self, operation: KeyedOperation[dict[str, Any]]) -> dict[str, Any]:
        # Fresh pool per request; an empty pool raises before any attempt.
        pool = pool_for(self._gemini_config, self._rng)
        return await self._invoker.invoke(pool, operation)


def _require(value: str | None, field_name: str) -> str:
    if value is None or not value.strip():
        raise InvalidRequestError(f"Missing required field: {field_name}")
    return value


def _speech_backend(value: str | None) -> SpeechBackend:
    if not value:
        return SpeechBackend.GEMINI
    try:
        return SpeechBackend(value.strip().lower())
    except ValueError:
        raise InvalidRequestError(f"Unknown speech provider: {value}") from None
