"""Key-rotating invoker - tries one logical call under each key in a pool.

Callers hand in an async closure that needs exactly one API key.  The
invoker walks the (already shuffled) pool in order, stops at the first
success and raises a single ``AggregatedError`` only when every key failed.

Policy:
- every ``Exception`` moves on to the next key, whatever its cause;
- a key is never tried twice within one invocation;
- no backoff between attempts and no parallel fan-out.

Timeouts belong to the operation (the HTTP client's deadline), not here.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Sequence

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from keyrelay.domain.enums import InvocationState
from keyrelay.domain.exceptions import AggregatedError, ConfigurationError
from keyrelay.shared.observability.metrics import PROVIDER_INVOCATIONS, PROVIDER_KEY_ATTEMPTS
from keyrelay.shared.providers.key_pool import mask_key
from keyrelay.shared.providers.types import KeyedOperation, T

logger = structlog.get_logger(__name__)


class KeyRotatingInvoker:
    """Stateless between calls; each ``invoke`` owns its pool copy and failure slot.

    Usage::

        invoker = KeyRotatingInvoker("gemini")
        data = await invoker.invoke(pool, lambda key: call_gemini(key, body))
    """

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id

    async def invoke(self, pool: Sequence[str], operation: KeyedOperation[T]) -> T:
        """Run ``operation`` under successive keys until one succeeds.

        Args:
            pool: Shuffled credentials; iterated in the given order.
            operation: Async callable receiving one key and returning the result.

        Returns:
            The first successful result.

        Raises:
            ConfigurationError: If ``pool`` is empty (no attempt is made).
            AggregatedError: If every key failed; carries the last failure only.
        """
        keys = list(pool)
        if not keys:
            raise ConfigurationError(
                f"No API keys configured for provider {self.provider_id!r}",
                provider=self.provider_id,
            )

        log = logger.bind(provider=self.provider_id, pool_size=len(keys))
        log.debug("key_rotation_state", state=InvocationState.PENDING.value)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(len(keys)),
            wait=wait_none(),
            retry=retry_if_exception_type(Exception),
            after=self._after_failure(keys, log),
        )

        result: Any = None
        try:
            async for attempt in retrying:
                with attempt:
                    number = attempt.retry_state.attempt_number
                    key = keys[number - 1]
                    log.debug(
                        "key_rotation_state",
                        state=InvocationState.ATTEMPTING.value,
                        attempt=number,
                        key=mask_key(key),
                    )
                    start = time.monotonic()
                    result = await operation(key)
                    latency_ms = (time.monotonic() - start) * 1000
                    PROVIDER_KEY_ATTEMPTS.labels(provider=self.provider_id, outcome="success").inc()
                    log.info(
                        "key_rotation_succeeded",
                        state=InvocationState.SUCCEEDED.value,
                        attempt=number,
                        latency_ms=float(f"{latency_ms:.1f}"),
                    )
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            PROVIDER_INVOCATIONS.labels(provider=self.provider_id, status="exhausted").inc()
            log.error(
                "key_rotation_exhausted",
                state=InvocationState.EXHAUSTED.value,
                attempts=len(keys),
                error=str(last_error),
            )
            raise AggregatedError(self.provider_id, last_error, attempts=len(keys)) from last_error

        PROVIDER_INVOCATIONS.labels(provider=self.provider_id, status="succeeded").inc()
        return result  # type: ignore[no-any-return]

    # ── Diagnostics ──────────────────────────────────────────
    def _after_failure(
        self, keys: list[str], log: structlog.stdlib.BoundLogger
    ) -> Callable[[RetryCallState], None]:
        def _log(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            key = keys[state.attempt_number - 1]
            PROVIDER_KEY_ATTEMPTS.labels(provider=self.provider_id, outcome="failure").inc()
            log.warning(
                "key_attempt_failed",
                attempt=state.attempt_number,
                key=mask_key(key),
                error=f"{type(exc).__name__}: {exc}" if exc else "unknown",
            )

        return _log
