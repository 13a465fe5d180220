import time
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from app.services.cache.base import BaseCacheService

logger = structlog.get_logger(__name__)


class MemoryCacheService(BaseCacheService):
    """
    Process-local TTL cache. Expired entries are dropped lazily when read.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.clock = clock or time.monotonic
        self._store: Dict[str, Tuple[Any, Optional[float]]] | None = None

    async def connect(self):
        if self._store is None:
            self._store = {}

    async def disconnect(self):
        self._store = None

    def flush(self):
        self._store = {}

    def _entries(self) -> Dict[str, Tuple[Any, Optional[float]]]:
        if self._store is None:
            raise RuntimeError("Cache not connected")
        return self._store

    def _live_entry(self, key: str) -> Tuple[Any, Optional[float]] | None:
        entry = self._entries().get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self._entries()[key]
            return None
        return entry

    async def get(self, key: str) -> Any:
        entry = self._live_entry(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        self._entries()[key] = (value, self.clock() + ttl if ttl else None)
        return True
