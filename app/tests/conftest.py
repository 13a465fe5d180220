import datetime
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.models.api_key import ApiKey
from app.models.tier import Tier
from app.services.cache.memory_cache import MemoryCacheService
from app.services.cryptapi_service import CryptapiService
from app.services.db.memory import InMemoryDatabase, MemoryConnectionService
from app.services.prices.price_service import PriceService
from app.utils.time import utcnow


class FakeUpstream:
    """Records outgoing requests and answers them with ``respond``."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []
        self.error: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.respond(request)

    def client(self, *args, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def db():
    service = MemoryConnectionService()
    service.db = InMemoryDatabase()
    yield service.db
    service.db = None


@pytest.fixture(autouse=True)
def cache():
    cache = MemoryCacheService()
    cache.flush()
    yield cache
    cache.flush()


@pytest.fixture
def client():
    from app.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def processor(monkeypatch):
    """Payment processor returning ``ADDR1`` for every address request."""
    state: Dict[str, Any] = {
        "status_code": 200,
        "json": {
            "status": "success",
            "address_in": "ADDR1",
            "address_out": "WALLET",
            "minimum_transaction_coin": 1,
            "priority": "default",
        },
    }

    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(state["status_code"], json=state["json"])

    upstream = FakeUpstream(respond)
    upstream.state = state
    monkeypatch.setattr(CryptapiService, "get_http_client", lambda self: upstream.client())
    return upstream


@pytest.fixture
def prices(monkeypatch):
    """Price providers answering from ``routes``: host -> callable(request) -> response."""
    routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.host)
        if route is None:
            return httpx.Response(404, json={})
        return route(request)

    upstream = FakeUpstream(respond)
    upstream.routes = routes
    monkeypatch.setattr(PriceService, "get_http_client", lambda self: upstream.client())
    return upstream


@pytest.fixture
def make_key(db):
    from app.repository.api_keys_repository import ApiKeysRepository

    def _store(key: str = "pa_test", calls: int = 10, expires_in: datetime.timedelta = datetime.timedelta(days=1)):
        now = utcnow()
        record = ApiKey(
            key=key,
            plan=Tier.PRO,
            calls_remaining=calls,
            created_at=now,
            expires_at=now + expires_in,
        )
        ApiKeysRepository(db).repository.rows[key] = record
        return record

    return _store
