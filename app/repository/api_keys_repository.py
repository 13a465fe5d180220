import datetime

import structlog

from app.models.api_key import ApiKey
from app.services.db.memory import InMemoryDatabase
from app.utils.time import utcnow

logger = structlog.get_logger(__name__)


class ApiKeyNotFoundError(Exception):
    pass


class ApiKeyExpiredError(Exception):
    def __init__(self, key: ApiKey):
        self.expires_at = key.expires_at
        super().__init__(f"API key expired at {key.expires_at.isoformat()}")


class ApiKeyQuotaExceededError(Exception):
    def __init__(self, key: ApiKey):
        self.plan = key.plan
        super().__init__(f"API key quota exhausted for plan {key.plan}")


class ApiKeysRepository:
    table_name = "api_keys"

    def __init__(self, db: InMemoryDatabase):
        self.db = db
        self.repository = self.db.table(self.table_name)

    async def create(self, api_key: ApiKey) -> ApiKey:
        async with self.repository.lock:
            self.repository.rows[api_key.key] = api_key.model_copy()
        return api_key.model_copy()

    def _get_valid(self, key: str, now: datetime.datetime) -> ApiKey:
        record = self.repository.rows.get(key)
        if record is None:
            raise ApiKeyNotFoundError()
        if record.is_expired(now):
            raise ApiKeyExpiredError(record)
        return record

    async def get_key(self, key: str, now: datetime.datetime | None = None) -> ApiKey:
        """Looks the key up without consuming quota. Expired keys raise ``ApiKeyExpiredError``."""
        return self._get_valid(key, now or utcnow()).model_copy()

    async def decrement_if_eligible(self, key: str, now: datetime.datetime | None = None) -> ApiKey:
        now = now or utcnow()
        async with self.repository.lock:
            record = self._get_valid(key, now)
            if record.calls_remaining <= 0:
                raise ApiKeyQuotaExceededError(record)
            record = record.model_copy(update={"calls_remaining": record.calls_remaining - 1})
            self.repository.rows[key] = record
        return record.model_copy()
