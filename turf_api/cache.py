# turf_api/cache.py
from __future__ import annotations

import threading
import time
from typing import Any, Dict, Optional, Tuple

# Simple in-memory TTL cache (sufficient for single-instance deploys)
# key -> (expires_at_epoch, value)
_cache: Dict[str, Tuple[float, Any]] = {}

# sync endpoints run in a threadpool; every access to _cache goes through this
_lock = threading.Lock()


def make_key(namespace: str, key: str) -> str:
    """
    Enforce namespaced cache keys to avoid collisions.
    Example:
      make_key("players", "summary") -> "players:summary"
    """
    namespace = namespace.strip()
    key = key.strip()
    if not namespace or not key:
        raise ValueError("Cache namespace and key must be non-empty")
    return f"{namespace}:{key}"


def get(key: str) -> Optional[Any]:
    with _lock:
        item = _cache.get(key)
        if not item:
            return None

        expires_at, value = item
        if time.time() > expires_at:
            _cache.pop(key, None)
            return None

        return value


def set(key: str, value: Any, ttl_seconds: int = 60) -> None:
    if ttl_seconds <= 0:
        # Do not cache if TTL is invalid
        return
    with _lock:
        _cache[key] = (time.time() + ttl_seconds, value)


def invalidate(namespace: str) -> int:
    """
    Drop every key under `namespace`. Returns how many were dropped.
    Called after any write that changes what aggregated views would show.
    """
    prefix = f"{namespace.strip()}:"
    with _lock:
        stale = [k for k in list(_cache) if k.startswith(prefix)]
        for k in stale:
            del _cache[k]
    return len(stale)


def clear() -> None:
    with _lock:
        _cache.clear()
