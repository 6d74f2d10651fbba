"""Cache module for admin/whitelist role answers.

This module caches, per email, whether the account is the admin account and
whether it is whitelisted, so that repeated role checks skip the database
until the entry expires or is invalidated.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from config import ROLE_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class RoleCache:
    """In-memory, time-stamped cache of role answers keyed by email.

    Thread-safe cache implementation using dictionary and locks.
    """

    def __init__(
        self,
        ttl_seconds: float = ROLE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize RoleCache.

        Args:
            ttl_seconds: Lifetime of an entry in seconds.
            clock: Time source returning seconds, injectable for tests.
        """
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._ttl = ttl_seconds
        self._clock = clock
        self._total_requests = 0
        self._hits = 0
        self._last_cleanup: Optional[float] = None
        logger.info("RoleCache initialized (ttl=%ss)", ttl_seconds)

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def _is_expired(self, entry: Dict[str, Any], now: float) -> bool:
        return now - entry["timestamp"] > self._ttl

    def get(self, email: str) -> Optional[Dict[str, Any]]:
        """Get a cached role answer.

        Args:
            email: Email to look up (case-insensitive).

        Returns:
            Dict with is_admin, is_whitelisted, timestamp and email, or None
            on a miss or an expired entry.
        """
        key = self._key(email)
        with self._lock:
            self._total_requests += 1
            entry = self._cache.get(key)
            if entry is None:
                logger.debug("Role cache miss: %s", key)
                return None
            if self._is_expired(entry, self._clock()):
                del self._cache[key]
                logger.debug("Role cache entry expired: %s", key)
                return None
            self._hits += 1
            logger.debug("Role cache hit: %s", key)
            return dict(entry)

    def set(self, email: str, is_admin: bool, is_whitelisted: bool) -> None:
        key = self._key(email)
        with self._lock:
            self._cache[key] = {
                "is_admin": is_admin,
                "is_whitelisted": is_whitelisted,
                "timestamp": self._clock(),
                "email": key,
            }

    def invalidate(self, email: Optional[str] = None) -> None:
        """Drop one email, or every entry when email is None."""
        with self._lock:
            if email is None:
                count = len(self._cache)
                self._cache.clear()
                logger.info("Role cache cleared (%d entries removed)", count)
            else:
                self._cache.pop(self._key(email), None)

    def cleanup(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired = [k for k, v in self._cache.items() if self._is_expired(v, now)]
            for key in expired:
                del self._cache[key]
            self._last_cleanup = now
        if expired:
            logger.debug("Role cache cleanup removed %d entries", len(expired))
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with size, per-entry ages, last cleanup time, total
            lookups and the hit rate (0.0 when nothing was looked up yet).
        """
        with self._lock:
            now = self._clock()
            entries = [
                {
                    "email": entry["email"],
                    "is_admin": entry["is_admin"],
                    "is_whitelisted": entry["is_whitelisted"],
                    "age": now - entry["timestamp"],
                }
                for entry in self._cache.values()
            ]
            hit_rate = (
                self._hits / self._total_requests if self._total_requests else 0.0
            )
            return {
                "size": len(self._cache),
                "entries": entries,
                "last_cleanup": self._last_cleanup,
                "total_requests": self._total_requests,
                "cache_hit_rate": hit_rate,
            }


# Global cache instance (shared across requests)
_global_cache: Optional[RoleCache] = None
_cache_lock = threading.Lock()


def get_role_cache() -> RoleCache:
    """Get global cache instance (singleton pattern).

    Returns:
        Global RoleCache instance.
    """
    global _global_cache
    if _global_cache is None:
        with _cache_lock:
            if _global_cache is None:
                _global_cache = RoleCache()
    return _global_cache
