"""Protocol for key/value cache backends."""

from abc import abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Cache(Protocol):
    """Minimal async key/value cache with TTL support."""
    
    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value, None on a miss."""
        ...
    
    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set a JSON-serializable value with an optional TTL in seconds."""
        ...
    
    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        ...
    
    @abstractmethod
    async def clear(self) -> None:
        """Remove every key."""
        ...
