"""Shared test fixtures."""

from __future__ import annotations

import os
import sys
from typing import Any, Callable

import httpx
import pytest

# Add src to path so imports work
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from keyrelay.config import Settings, get_settings


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Settings with test keys; never reads real credentials from .env."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "_env_file": None,
            "gemini_api_keys": "key-alpha-1111,key-bravo-2222,key-charlie-3333",
            "voicerss_api_key": "voicerss-test-key",
            "prometheus_enabled": True,
        }
        values.update(overrides)
        return get_settings(**values)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


def gemini_text_body(text: str = "hello") -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def gemini_audio_body(data: str = "UklGRg==") -> dict[str, Any]:
    return {
        "candidates": [
            {
                "content": {
                    "parts": [{"inlineData": {"mimeType": "audio/L16;rate=24000", "data": data}}]
                }
            }
        ]
    }


def imagen_body(data: str = "iVBORw0KGgo=") -> dict[str, Any]:
    return {"predictions": [{"bytesBase64Encoded": data, "mimeType": "image/png"}]}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def keys_used(self) -> list[str]:
        return [r.url.params.get("key", "") for r in self.requests]


@pytest.fixture
def make_transport() -> Callable[[Handler], RecordingTransport]:
    return RecordingTransport
