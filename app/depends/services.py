from fastapi import Depends

from app.services.cache.memory_cache import MemoryCacheService
from app.services.db.memory import MemoryConnectionService
from app.services.orders_service import OrdersService
from app.services.prices.price_service import PriceService
from app.services.webhooks.cryptapi import CryptapiWebhookService


def get_price_service() -> PriceService:
    return PriceService(cache=MemoryCacheService())


def get_orders_service(db=Depends(MemoryConnectionService().connect)) -> OrdersService:
    return OrdersService(db=db)


def get_webhook_service(db=Depends(MemoryConnectionService().connect)) -> CryptapiWebhookService:
    return CryptapiWebhookService(db=db)
