import datetime
import secrets
from typing import Optional

import structlog

from app.models.api_key import ApiKey
from app.models.tier import Plan
from app.repository.api_keys_repository import ApiKeysRepository
from app.services.db.memory import InMemoryDatabase
from app.settings import settings
from app.utils.time import utcnow

logger = structlog.get_logger(__name__)


class ApiKeysService:
    token_bytes = 24

    def __init__(self, db: InMemoryDatabase):
        self._api_keys_repository = ApiKeysRepository(db)

    def generate_key(self) -> str:
        # hex keeps the token free of look-alike characters
        return f"{settings.api_key.prefix}{secrets.token_hex(self.token_bytes)}"

    async def mint_key(self, plan: Plan, email: Optional[str] = None, order_id: Optional[str] = None) -> str:
        now = utcnow()
        api_key = ApiKey(
            key=self.generate_key(),
            plan=plan.id,
            calls_remaining=plan.calls,
            email=email,
            created_at=now,
            expires_at=now + datetime.timedelta(days=settings.api_key.validity_days),
            order_id=order_id,
        )
        await self._api_keys_repository.create(api_key)
        logger.info(
            "API key minted",
            plan=plan.id,
            order_id=order_id,
            calls=plan.calls,
            expires_at=api_key.expires_at.isoformat(),
            key_prefix=api_key.key[:len(settings.api_key.prefix) + 6],
        )
        return api_key.key
