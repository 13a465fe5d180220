import datetime
from typing import Optional

from pydantic import BaseModel

from app.models.config import ThrottlingConfig
from app.models.tier import Tier


class ApiKey(BaseModel):
    key: str
    plan: Tier
    calls_remaining: int
    email: Optional[str] = None
    created_at: datetime.datetime
    expires_at: datetime.datetime
    order_id: Optional[str] = None

    def is_expired(self, now: datetime.datetime) -> bool:
        return now > self.expires_at


class KeyContext(BaseModel):
    """
    What the validation gate attaches to ``request.state.api_key``.
    Requests without a key get the free tier descriptor and no record.
    """
    tier: Tier
    api_key: Optional[ApiKey] = None
    free_tier: Optional[ThrottlingConfig] = None


class CurrentUsage(BaseModel):
    tier: Tier
    calls_remaining: Optional[int] = None
    expires_at: Optional[datetime.datetime] = None
    free_tier: Optional[ThrottlingConfig] = None
