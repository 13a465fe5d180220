import time
from typing import Any, Dict

from fastapi import APIRouter

from app.models.meta import HealthResDTO
from app.settings import settings

router = APIRouter(tags=["meta"])

started_at = time.monotonic()


@router.get("/")
async def root() -> Dict[str, Any]:
    return {
        "name": settings.service_name,
        "version": settings.version,
        "endpoints": [
            "GET /price/{type}/{symbol} - Get current price (crypto, stock, forex)",
            "POST /alert/check - Check alert condition",
            f"POST /price/batch - Batch price check (max {settings.prices.batch_max})",
            "GET /gas - Ethereum gas prices",
            "POST /orders - Buy an API key",
            "GET /orders/{order_id} - Order status and API key",
            "GET /usage/current - Remaining calls",
            "GET /health - Health check",
        ],
        "plans": [plan.model_dump() for plan in settings.plans.values()],
        "examples": {
            "crypto": "/price/crypto/bitcoin",
            "stock": "/price/stock/AAPL",
            "forex": "/price/forex/EURUSD",
        },
    }


@router.get("/health")
async def health() -> HealthResDTO:
    return HealthResDTO(uptime=round(time.monotonic() - started_at, 3))
