import asyncio
from typing import Any, Dict

import structlog

from app.services.db.base import BaseDBConnectionService

logger = structlog.get_logger(__name__)


class MemoryTable:
    """
    A named dict of rows. Read-modify-write sequences on the rows must hold ``lock``.
    """

    def __init__(self, name: str):
        self.name = name
        self.rows: Dict[str, Any] = {}
        self.lock = asyncio.Lock()

    def __len__(self):
        return len(self.rows)


class InMemoryDatabase:
    def __init__(self):
        self._tables: Dict[str, MemoryTable] = {}

    def table(self, name: str) -> MemoryTable:
        if name not in self._tables:
            self._tables[name] = MemoryTable(name)
        return self._tables[name]


class MemoryConnectionService(BaseDBConnectionService):
    db: InMemoryDatabase | None = None

    async def _connect(self, **kwargs):
        if not self.db:
            logger.info("Creating in-memory database, state is lost on restart")
            self.db = InMemoryDatabase()
        return self.db
