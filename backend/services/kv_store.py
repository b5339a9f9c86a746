"""
Key-value store with per-entry time-to-live.

Holds staged images (buffer strategy) and, when deduplication is enabled,
the ids of checkout sessions that were already sent to Prodigi.

The in-memory implementation is per-process. For multi-worker
deployments, implement KeyValueStore on top of Redis (SET with EX).
"""
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def put(self, key: str, value: Any) -> None: ...

    def get(self, key: str) -> Optional[Any]: ...

    def delete(self, key: str) -> bool: ...


class InMemoryTTLStore:
    """
    Dict-backed store; expired entries are dropped on access and swept on
    every write.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # {key: (expires_at, value)}
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def _cleanup(self):
        """Remove expired entries."""
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info(f"Evicted {len(expired)} expired entries")

    def put(self, key: str, value: Any) -> None:
        self._cleanup()
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        self._cleanup()
        return len(self._entries)
