"""Credential pool - parsing, shuffling and masking of API keys.

A pool is built fresh for every request from the delimited configuration
value and shuffled so load spreads across keys over time instead of always
hitting the first-listed one.
"""

from __future__ import annotations

import random

import structlog

from keyrelay.domain.exceptions import ConfigurationError
from keyrelay.shared.providers.types import ProviderConfig

logger = structlog.get_logger(__name__)


def build_pool(raw: str | None, *, provider_id: str, delimiter: str = ",") -> list[str]:
    """Split ``raw`` into trimmed, non-empty keys.

    Raises:
        ConfigurationError: If no key survives parsing.
    """
    keys = [k.strip() for k in (raw or "").split(delimiter)]
    keys = [k for k in keys if k]
    if not keys:
        logger.error("credential_pool_empty", provider=provider_id)
        raise ConfigurationError(
            f"No API keys configured for provider {provider_id!r}",
            provider=provider_id,
        )
    return keys


def shuffle_pool(pool: list[str], rng: random.Random | None = None) -> list[str]:
    """Uniformly permute ``pool`` in place and return it."""
    if rng is not None:
        rng.shuffle(pool)
    else:
        random.shuffle(pool)
    return pool


def pool_for(cfg: ProviderConfig, rng: random.Random | None = None) -> list[str]:
    """Build and shuffle the working pool for one request."""
    pool = build_pool(cfg.raw_keys, provider_id=cfg.provider_id, delimiter=cfg.delimiter)
    logger.debug("credential_pool_built", provider=cfg.provider_id, size=len(pool))
    return shuffle_pool(pool, rng)


def mask_key(key: str) -> str:
    """Only the last four characters ever reach a log line."""
    return f"...{key[-4:]}" if len(key) > 4 else "..."
