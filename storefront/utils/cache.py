# storefront/utils/cache.py
"""Process-wide response cache.

Values expire after a per-key TTL. ``clear(pattern)`` drops every key that
*contains* ``pattern`` anywhere, not just keys starting with it; ``clear()``
with no argument flushes the whole cache. The cache lives in this process
only, so with several API instances each one may serve entries up to one
TTL old.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

# Key fragments used by the read paths
PRODUCT_PREFIX = "prod_"
PRODUCT_LIST_PREFIX = "products_"
ORDER_PREFIX = "ord_"
USER_ORDERS_PREFIX = "user_orders"
ALL_ORDERS_PREFIX = "all_orders"

# Everything an inventory or order mutation may have made stale
MUTATION_PREFIXES = (
    PRODUCT_PREFIX,
    PRODUCT_LIST_PREFIX,
    ORDER_PREFIX,
    USER_ORDERS_PREFIX,
    ALL_ORDERS_PREFIX,
)

class ResponseCache:
    """In-memory key/value store with TTL and substring invalidation"""

    def __init__(self, default_ttl: int = 300, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self.logger = logging.getLogger(__name__)

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None on miss/expiry"""
        try:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                self._entries.pop(key, None)
                return None
            return value
        except Exception as e:
            self.logger.warning(f"Cache read failed for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None):
        try:
            lifetime = self.default_ttl if ttl is None else ttl
            self._entries[key] = (self._clock() + lifetime, value)
        except Exception as e:
            self.logger.warning(f"Cache write failed for {key}: {e}")

    def clear(self, pattern: Optional[str] = None) -> int:
        """Remove keys containing ``pattern``, or everything. Returns the count."""
        try:
            if pattern is None:
                removed = len(self._entries)
                self._entries.clear()
                return removed

            stale = [key for key in list(self._entries) if pattern in key]
            for key in stale:
                self._entries.pop(key, None)
            return len(stale)
        except Exception as e:
            self.logger.warning(f"Cache clear failed for {pattern}: {e}")
            return 0

    def invalidate(self, *patterns: str):
        """Clear several substrings at once"""
        removed = sum(self.clear(pattern) for pattern in patterns)
        if removed:
            self.logger.debug(f"Invalidated {removed} cache entries for {patterns}")

    def __len__(self) -> int:
        return len(self._entries)

_cache: Optional[ResponseCache] = None

def init_cache(default_ttl: int = 300) -> ResponseCache:
    """Create (or replace) the process-wide cache"""
    global _cache
    _cache = ResponseCache(default_ttl=default_ttl)
    return _cache

def get_cache() -> ResponseCache:
    """Return the process-wide cache, creating it on first use"""
    if _cache is None:
        return init_cache()
    return _cache
