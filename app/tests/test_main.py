from fastapi.testclient import TestClient

from app.main import app
from app.services.cache.memory_cache import MemoryCacheService
from app.services.db.memory import MemoryConnectionService


def test_lifespan_connects_and_releases_storage(db):
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert MemoryConnectionService().db is db

    assert MemoryConnectionService().db is None
    assert MemoryCacheService()._store is None
