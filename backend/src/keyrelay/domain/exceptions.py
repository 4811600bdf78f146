"""Domain-specific exception hierarchy.

All exceptions inherit from ``DomainError`` so callers can catch the entire
family in one clause while still discriminating on subclass.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain-layer errors."""

    def __init__(self, message: str, *, code: str = "DOMAIN_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


# ── Configuration ────────────────────────────────────────────
class ConfigurationError(DomainError):
    """Credentials for a provider are missing or parse to an empty pool."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message, code="CONFIGURATION_ERROR")


# ── Request ──────────────────────────────────────────────────
class InvalidRequestError(DomainError):
    """Caller sent an unknown action or a body we cannot build a request from."""

    def __init__(self, message: str, *, code: str = "INVALID_REQUEST") -> None:
        super().__init__(message, code=code)


class UpstreamResponseError(InvalidRequestError):
    """Provider answered 2xx but the body lacks the field we extract."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"[{provider}] {message}", code="UPSTREAM_RESPONSE_INVALID")


# ── Key rotation ─────────────────────────────────────────────
class AttemptFailure(DomainError):
    """A single credential's call failed (non-2xx status or transport error)."""

    def __init__(self, provider: str, message: str, *, status_code: int | None = None) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message, code="ATTEMPT_FAILED")


class AggregatedError(DomainError):
    """Every credential in the pool failed.

    Only the last failure is carried; earlier ones are logged, not kept.
    """

    def __init__(self, provider: str, last_error: BaseException | None, *, attempts: int) -> None:
        self.provider = provider
        self.last_error = last_error
        self.attempts = attempts
        detail = _describe(last_error) if last_error is not None else "no attempt recorded"
        super().__init__(
            f"All {attempts} {provider} API keys failed; last error: {detail}",
            code="ALL_KEYS_FAILED",
        )


# ── Speech ───────────────────────────────────────────────────
class SpeechProviderError(DomainError):
    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"[{provider}] {message}", code="SPEECH_PROVIDER_ERROR")


def _describe(exc: BaseException) -> str:
    if isinstance(exc, DomainError):
        return exc.message
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__
