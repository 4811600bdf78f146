"""Core types for the key-rotation framework."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

# A call that needs exactly one credential. Every provider closure has this shape.
KeyedOperation = Callable[[str], Awaitable[T]]


@dataclass(frozen=True)
class ProviderConfig:
    """Static configuration for a single provider.

    Attributes:
        provider_id:  Unique identifier (e.g. "gemini", "voicerss").
        raw_keys:     Delimited credential string as read from configuration.
        delimiter:    Separator used in ``raw_keys``.
        base_url:     Root of the provider's HTTP API.
        metadata:     Arbitrary extra config (model names, voice, etc.).
    """

    provider_id: str
    raw_keys: str = ""
    delimiter: str = ","
    base_url: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def has_keys(self) -> bool:
        return any(k.strip() for k in self.raw_keys.split(self.delimiter))

    @property
    def key_count(self) -> int:
        return sum(1 for k in self.raw_keys.split(self.delimiter) if k.strip())
