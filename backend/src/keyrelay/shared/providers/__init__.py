"""Key-rotation framework.

Builds shuffled credential pools and runs a single-key call across them
until one key succeeds, for any outbound API provider.
"""

from keyrelay.shared.providers.invoker import KeyRotatingInvoker
from keyrelay.shared.providers.key_pool import build_pool, mask_key, pool_for, shuffle_pool
from keyrelay.shared.providers.types import KeyedOperation, ProviderConfig

__all__ = [
    "KeyRotatingInvoker",
    "KeyedOperation",
    "ProviderConfig",
    "build_pool",
    "mask_key",
    "pool_for",
    "shuffle_pool",
]
