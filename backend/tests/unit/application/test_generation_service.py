"""Unit tests for GenerationService dispatch."""

from __future__ import annotations

import copy
import random
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from keyrelay.adapters.outbound.providers import build_provider_configs
from keyrelay.application.dtos import GenerateRequest
from keyrelay.application.services import GenerationService
from keyrelay.domain.exceptions import (
    AggregatedError,
    AttemptFailure,
    ConfigurationError,
    InvalidRequestError,
    SpeechProviderError,
    UpstreamResponseError,
)
from keyrelay.ports.outbound import GenerativeProviderPort, SpeechSynthesisPort


@pytest.fixture
def gemini() -> AsyncMock:
    mock = AsyncMock(spec=GenerativeProviderPort)
    mock.generate_text.return_value = {"text": "ok"}
    mock.generate_image.return_value = {"image": "abc=", "mimeType": "image/png"}
    mock.synthesize_speech.return_value = {"audio": "AAAA", "mimeType": "audio/L16"}
    return mock


@pytest.fixture
def speech() -> Mock:
    mock = Mock(spec=SpeechSynthesisPort)
    mock.build_url.return_value = "https://api.voicerss.org/?key=k&src=hi"
    mock.synthesize = AsyncMock(return_value={"audio": "SUQz", "mimeType": "audio/mpeg"})
    return mock


def _service(settings, gemini, speech, *, seed: int = 3) -> GenerationService:
    configs = build_provider_configs(settings)
    return GenerationService(
        gemini_config=configs["gemini"],
        gemini=gemini,
        speech=speech,
        rng=random.Random(seed),
    )


class TestDispatch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["video", "", None, "TEXTS", "TEXT", " text "])
    async def test_unknown_action_makes_no_call(self, settings, gemini, speech, action) -> None:
        service = _service(settings, gemini, speech)
        with pytest.raises(InvalidRequestError) as exc_info:
            await service.handle(GenerateRequest(type=action, prompt="hi"))
        assert exc_info.value.message == "Invalid request type"
        gemini.generate_text.assert_not_called()
        speech.synthesize.assert_not_called()

    @pytest.mark.asyncio
    async def test_action_field_is_accepted(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        result = await service.handle(GenerateRequest(action="image", prompt="a cat"))
        assert result["image"] == "abc="
        _key, payload = gemini.generate_image.await_args.args
        assert payload == {"instances": [{"prompt": "a cat"}], "parameters": {"sampleCount": 1}}

    @pytest.mark.asyncio
    async def test_payload_forwarded_untouched(self, settings, gemini, speech) -> None:
        payload = {"contents": [{"parts": [{"text": "raw"}]}], "generationConfig": {"temperature": 0.2}}
        expected = copy.deepcopy(payload)
        service = _service(settings, gemini, speech)

        await service.handle(GenerateRequest(type="text", payload=payload))

        key, sent = gemini.generate_text.await_args.args
        assert sent == expected
        assert key in {"key-alpha-1111", "key-bravo-2222", "key-charlie-3333"}

    @pytest.mark.asyncio
    async def test_text_from_prompt(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        await service.handle(GenerateRequest(type="text", prompt="hello", system="terse"))
        _key, sent = gemini.generate_text.await_args.args
        assert sent["contents"][0]["parts"][0]["text"] == "hello"
        assert sent["systemInstruction"]["parts"][0]["text"] == "terse"

    @pytest.mark.asyncio
    async def test_text_without_prompt_or_payload(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        with pytest.raises(InvalidRequestError):
            await service.handle(GenerateRequest(type="text"))
        gemini.generate_text.assert_not_called()


class TestKeyRotationThroughService:
    @pytest.mark.asyncio
    async def test_empty_pool_is_configuration_error(self, make_settings, gemini, speech) -> None:
        service = _service(make_settings(gemini_api_keys=" , "), gemini, speech)
        with pytest.raises(ConfigurationError):
            await service.handle(GenerateRequest(type="text", prompt="hi"))
        gemini.generate_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_rotates_to_working_key(self, settings, gemini, speech) -> None:
        calls: list[str] = []

        async def _generate(key: str, payload: dict[str, Any]) -> dict[str, Any]:
            calls.append(key)
            if key != "key-charlie-3333":
                raise AttemptFailure("gemini", "API Error: 429 Too Many Requests", status_code=429)
            return {"text": "finally"}

        gemini.generate_text.side_effect = _generate
        service = _service(settings, gemini, speech)

        result = await service.handle(GenerateRequest(type="text", prompt="hi"))

        assert result == {"text": "finally"}
        assert calls[-1] == "key-charlie-3333"
        assert len(calls) == len(set(calls))

    @pytest.mark.asyncio
    async def test_malformed_upstream_body_is_rotated_too(self, settings, gemini, speech) -> None:
        gemini.generate_image.side_effect = UpstreamResponseError("gemini", "no image bytes")
        service = _service(settings, gemini, speech)

        with pytest.raises(AggregatedError) as exc_info:
            await service.handle(GenerateRequest(type="image", prompt="a cat"))

        assert gemini.generate_image.await_count == 3
        assert "no image bytes" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_each_request_gets_fresh_pool(self, settings, gemini, speech) -> None:
        service = GenerationService(
            gemini_config=build_provider_configs(settings)["gemini"],
            gemini=gemini,
            speech=speech,
        )
        first_keys = set()
        for _ in range(40):
            await service.handle(GenerateRequest(type="text", prompt="hi"))
            first_keys.add(gemini.generate_text.await_args.args[0])
        assert len(first_keys) > 1


class TestSpeech:
    @pytest.mark.asyncio
    async def test_gemini_tts_from_text(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        result = await service.handle(GenerateRequest(type="tts", text="halo", voice="Puck"))
        assert result["audio"] == "AAAA"
        _key, sent = gemini.synthesize_speech.await_args.args
        voice = sent["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
        assert voice["voiceName"] == "Puck"
        speech.synthesize.assert_not_called()

    @pytest.mark.asyncio
    async def test_gemini_tts_default_voice(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        await service.handle(GenerateRequest(type="tts", payload={"text": "halo"}))
        _key, sent = gemini.synthesize_speech.await_args.args
        voice = sent["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
        assert voice["voiceName"] == settings.gemini_tts_voice

    @pytest.mark.asyncio
    async def test_voicerss_is_single_attempt(self, settings, gemini, speech) -> None:
        speech.synthesize.side_effect = SpeechProviderError("voicerss", "ERROR: quota")
        service = _service(settings, gemini, speech)

        with pytest.raises(SpeechProviderError):
            await service.handle(GenerateRequest(type="tts", provider="voicerss", text="halo"))

        assert speech.synthesize.await_count == 1
        gemini.synthesize_speech.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_speech_provider(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        with pytest.raises(InvalidRequestError):
            await service.handle(GenerateRequest(type="tts", provider="polly", text="halo"))

    @pytest.mark.asyncio
    async def test_greeting_returns_url_without_network(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        result = await service.handle(GenerateRequest(type="greeting-tts", payload={"text": "hi"}))
        assert result == {"url": "https://api.voicerss.org/?key=k&src=hi"}
        speech.build_url.assert_called_once_with("hi")
        speech.synthesize.assert_not_called()

    @pytest.mark.asyncio
    async def test_greeting_needs_text(self, settings, gemini, speech) -> None:
        service = _service(settings, gemini, speech)
        with pytest.raises(InvalidRequestError):
            await service.handle(GenerateRequest(type="greeting-tts"))
