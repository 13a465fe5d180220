from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException
from fastapi.requests import Request
from fastapi.security import APIKeyHeader

from app.models.api_key import KeyContext
from app.models.tier import Tier
from app.repository.api_keys_repository import (
    ApiKeysRepository, ApiKeyNotFoundError, ApiKeyExpiredError, ApiKeyQuotaExceededError,
)
from app.services.db.memory import InMemoryDatabase, MemoryConnectionService
from app.settings import settings

logger = structlog.get_logger(__name__)

api_key_header = APIKeyHeader(name=settings.api_key.header_name, auto_error=False)


def free_tier_context() -> KeyContext:
    # TODO: count keyless calls per client IP against settings.free_tier, nothing enforces it yet
    return KeyContext(tier=Tier.FREE, free_tier=settings.free_tier)


def _invalid_key():
    logger.info("Rejected unknown API key")
    return HTTPException(status_code=401, detail="Invalid API key")


def _expired_key(e: ApiKeyExpiredError):
    logger.info("Rejected expired API key", expires_at=e.expires_at.isoformat())
    return HTTPException(status_code=401, detail="API key expired")


def _exhausted_key(e: ApiKeyQuotaExceededError):
    logger.info("Rejected exhausted API key", plan=e.plan)
    return HTTPException(status_code=429, detail="API key quota exhausted")


class KeyGate:
    """
    Holds the checked key of a request. ``consume`` takes the call off the key and is
    called by the endpoint once its input is valid, so rejected requests cost nothing.
    """

    def __init__(self, request: Request, context: KeyContext, db: InMemoryDatabase):
        self.request = request
        self.context = context
        self._api_keys_repository = ApiKeysRepository(db)
        request.state.api_key = context

    async def consume(self) -> KeyContext:
        if self.context.api_key is None:
            return self.context
        try:
            record = await self._api_keys_repository.decrement_if_eligible(self.context.api_key.key)
        except ApiKeyNotFoundError:
            raise _invalid_key()
        except ApiKeyExpiredError as e:
            raise _expired_key(e)
        except ApiKeyQuotaExceededError as e:
            raise _exhausted_key(e)
        self.context = KeyContext(tier=record.plan, api_key=record)
        self.request.state.api_key = self.context
        return self.context


async def api_key_dependency(
        request: Request,
        api_key: Annotated[Optional[str], Depends(api_key_header)],
        db=Depends(MemoryConnectionService().connect),
) -> KeyGate:
    """
    Rejects unknown, expired and exhausted keys without consuming a call.
    Requests without a key continue on the free tier.
    """
    if not api_key:
        return KeyGate(request, free_tier_context(), db)

    try:
        record = await ApiKeysRepository(db).get_key(api_key)
    except ApiKeyNotFoundError:
        raise _invalid_key()
    except ApiKeyExpiredError as e:
        raise _expired_key(e)
    if record.calls_remaining <= 0:
        raise _exhausted_key(ApiKeyQuotaExceededError(record))
    return KeyGate(request, KeyContext(tier=record.plan, api_key=record), db)


async def current_key_dependency(
        api_key: Annotated[Optional[str], Depends(api_key_header)],
        db=Depends(MemoryConnectionService().connect),
) -> KeyContext:
    """Looks the key up for reporting, exhausted keys are not rejected."""
    if not api_key:
        return free_tier_context()
    try:
        record = await ApiKeysRepository(db).get_key(api_key)
    except ApiKeyNotFoundError:
        raise _invalid_key()
    except ApiKeyExpiredError as e:
        raise _expired_key(e)
    return KeyContext(tier=record.plan, api_key=record)
