"""Simple in-memory TTL cache plus the deterministic key generator.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the same query may be fetched twice (once per worker). That is acceptable
here — the cache still keeps repeat page views from hitting the API.
"""

import hashlib
import json
import threading
import time
from typing import Any, Callable, Mapping

KEY_PREFIX = "gscd_cache_"

# Long TTL for successful responses (72 hours).
DEFAULT_TTL_SECONDS = 72 * 60 * 60


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Returned by TTLCache.get for absent/expired keys; never a cacheable value.
MISSING = _Missing()

_SCALARS = (str, int, float, bool, type(None))


def generate_key(params: Mapping[str, Any]) -> str:
    """Fingerprint query parameters into a stable 32-char hex key.

    Keys are sorted so insertion order does not matter. JSON keeps "30",
    30, null and a missing key distinct from each other.
    """
    for name, value in params.items():
        if not isinstance(value, _SCALARS):
            raise TypeError(f"Cache key parameter {name!r} must be a scalar, got {type(value).__name__}")
    payload = json.dumps(dict(params), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


class TTLCache:
    def __init__(self, prefix: str = KEY_PREFIX, clock: Callable[[], float] = time.time):
        self._store: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._prefix = prefix
        self._clock = clock

    def get(self, key: str) -> Any:
        full_key = self._prefix + key
        with self._lock:
            if full_key in self._store:
                expires_at, value = self._store[full_key]
                if self._clock() < expires_at:
                    return value
                del self._store[full_key]
        return MISSING

    def set(self, key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> bool:
        if value is MISSING:
            raise ValueError("MISSING cannot be stored")
        with self._lock:
            self._store[self._prefix + key] = (self._clock() + ttl_seconds, value)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(self._prefix + key, MISSING) is not MISSING

    def clear_all(self) -> int:
        """Drop every entry under this cache's prefix. Returns how many were removed."""
        with self._lock:
            keys = [k for k in self._store if k.startswith(self._prefix)]
            for k in keys:
                del self._store[k]
        return len(keys)

    def count(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(
                1 for k, (expires_at, _) in self._store.items()
                if k.startswith(self._prefix) and now < expires_at
            )

    def expires_at(self, key: str) -> float | None:
        """Expiry timestamp of a live entry, or None when absent or expired."""
        with self._lock:
            entry = self._store.get(self._prefix + key)
        if entry is None or self._clock() >= entry[0]:
            return None
        return entry[0]


cache = TTLCache()
