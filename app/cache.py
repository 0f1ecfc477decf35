"""In-process key/value cache with per-entry expiry."""

import copy
import fnmatch
import logging
import threading
import time

logger = logging.getLogger(__name__)


class TTLCache:
    """Small key/value store; values are copied in and out."""

    def __init__(self, default_ttl=1800, clock=time.time):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                self._entries.pop(key, None)
                return None
            return copy.deepcopy(value)

    def set(self, key, value, ttl=None):
        ttl = self.default_ttl if ttl is None else ttl
        # ttl <= 0 keeps the entry until it is deleted
        expires_at = self._clock() + ttl if ttl > 0 else None
        with self._lock:
            self._entries[key] = (copy.deepcopy(value), expires_at)

    def delete(self, key):
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_pattern(self, pattern):
        """Delete keys matching a glob pattern such as ``recommendations:7:*``."""
        with self._lock:
            keys = [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]
            for key in keys:
                del self._entries[key]
        logger.debug("Deleted %d cache keys matching %s", len(keys), pattern)
        return len(keys)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def ping(self):
        probe = "__health__"
        self.set(probe, 1, ttl=5)
        ok = self.get(probe) == 1
        self.delete(probe)
        return ok


def get_cache(app):
    return app.extensions["catalog_cache"]
