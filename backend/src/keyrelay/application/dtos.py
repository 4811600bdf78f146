"""Data Transfer Objects — Pydantic models for API boundaries.

DTOs handle serialisation, validation, and documentation.  They live in the
application layer because they are *not* domain objects — they adapt between
the external world and the domain.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════
#  Common
# ═══════════════════════════════════════════════════════════════
class ErrorResponse(BaseModel):
    code: str
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    environment: str = "development"
    providers: dict[str, int | bool] = Field(default_factory=dict)


# ═══════════════════════════════════════════════════════════════
#  Generate
# ═══════════════════════════════════════════════════════════════
class GenerateRequest(BaseModel):
    """Body of ``POST /api/generate``.

    ``type`` and ``action`` are interchangeable discriminators.  ``payload``
    is forwarded to the provider untouched; the remaining fields let a
    caller skip building provider-native JSON.
    """

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    action: str | None = None
    payload: dict[str, Any] | None = None
    prompt: str | None = None
    system: str | None = None
    text: str | None = None
    voice: str | None = None
    provider: str | None = None

    @property
    def discriminator(self) -> str | None:
        return self.type or self.action

    @property
    def speech_text(self) -> str | None:
        if self.text:
            return self.text
        if self.payload and isinstance(self.payload.get("text"), str):
            return self.payload["text"]  # type: ignore[no-any-return]
        return None
