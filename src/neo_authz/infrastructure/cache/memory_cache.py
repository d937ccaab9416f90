"""In-memory cache backend."""

import asyncio
import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ...utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiration."""
    
    value: Any
    expires_at: Optional[datetime] = None
    
    def is_expired(self) -> bool:
        """Check if entry is expired."""
        if self.expires_at is None:
            return False
        return utc_now() >= self.expires_at


class MemoryCache:
    """Process-local cache. Values are deep-copied on the way in and out."""
    
    def __init__(self, default_ttl: Optional[int] = None, max_entries: int = 10000):
        self._entries: Dict[str, MemoryCacheEntry] = {}
        self._lock = asyncio.Lock()
        self._default_ttl = default_ttl
        self._max_entries = max_entries
    
    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired():
                del self._entries[key]
                return None
            return copy.deepcopy(entry.value)
    
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        ttl = ttl if ttl is not None else self._default_ttl
        expires_at = utc_now() + timedelta(seconds=ttl) if ttl else None
        async with self._lock:
            if len(self._entries) >= self._max_entries and key not in self._entries:
                self._evict_expired()
                if len(self._entries) >= self._max_entries:
                    # Drop the oldest insertion
                    self._entries.pop(next(iter(self._entries)))
            self._entries[key] = MemoryCacheEntry(value=copy.deepcopy(value), expires_at=expires_at)
        return True
    
    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(key, None) is not None
    
    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
    
    def _evict_expired(self) -> None:
        expired = [key for key, entry in self._entries.items() if entry.is_expired()]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired cache entries")
