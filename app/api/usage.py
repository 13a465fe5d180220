from typing import Annotated

from fastapi import APIRouter, Depends

from app.depends.auth import current_key_dependency
from app.models.api_key import CurrentUsage, KeyContext

router = APIRouter(prefix="/usage", tags=["usage"])


@router.get("/current")
async def current_usage(key: Annotated[KeyContext, Depends(current_key_dependency)]) -> CurrentUsage:
    if key.api_key is None:
        return CurrentUsage(tier=key.tier, free_tier=key.free_tier)
    return CurrentUsage(
        tier=key.tier,
        calls_remaining=key.api_key.calls_remaining,
        expires_at=key.api_key.expires_at,
    )
