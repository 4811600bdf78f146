"""Outbound ports — interfaces that infrastructure adapters must implement.

These are the *driven* ports in hexagonal architecture.  The application
layer depends only on these abstractions, never on concrete HTTP clients.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# ═══════════════════════════════════════════════════════════════
#  Response adapters
# ═══════════════════════════════════════════════════════════════
class ResponseAdapter(ABC):
    """Pulls the useful result out of one provider's JSON body."""

    provider: str

    @abstractmethod
    def extract(self, data: dict[str, Any]) -> dict[str, Any]:
        """Return the shaped result or raise ``UpstreamResponseError``."""
        ...


# ═══════════════════════════════════════════════════════════════
#  Provider ports
# ═══════════════════════════════════════════════════════════════
class GenerativeProviderPort(ABC):
    """Single-key calls against a generative API.  No retry logic here."""

    @abstractmethod
    async def generate_text(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    async def generate_image(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    async def synthesize_speech(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]: ...


class SpeechSynthesisPort(ABC):
    """Single fixed-key speech API."""

    @abstractmethod
    def build_url(self, text: str, *, base64: bool = False) -> str:
        """Return the GET URL that produces audio for ``text``."""
        ...

    @abstractmethod
    async def synthesize(self, text: str) -> dict[str, Any]: ...
