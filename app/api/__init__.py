from app.api.alerts import router as alerts_router
from app.api.meta import router as meta_router
from app.api.orders import router as orders_router
from app.api.prices import router as prices_router
from app.api.usage import router as usage_router
from app.api.webhooks import router as webhooks_router

__all__ = [
    "alerts_router",
    "meta_router",
    "orders_router",
    "prices_router",
    "usage_router",
    "webhooks_router",
]
