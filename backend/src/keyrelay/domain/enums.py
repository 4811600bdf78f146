"""Domain enumerations for the generation relay."""

from __future__ import annotations

import enum


class Action(str, enum.Enum):
    """Request discriminator accepted by the generate endpoint."""

    TEXT = "text"
    IMAGE = "image"
    TTS = "tts"
    GREETING_TTS = "greeting-tts"

    @classmethod
    def parse(cls, value: str | None) -> Action | None:
        # Exact match only; "TEXT" or " tts " are unknown actions.
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class SpeechBackend(str, enum.Enum):
    """Which provider synthesises speech for a ``tts`` action."""

    GEMINI = "gemini"
    VOICERSS = "voicerss"


class InvocationState(str, enum.Enum):
    """Lifecycle of one key-rotating invocation.

    ``pending -> attempting* -> succeeded | exhausted``; both terminal
    states are final.
    """

    PENDING = "pending"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
