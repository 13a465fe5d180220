from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import alerts_router, meta_router, orders_router, prices_router, usage_router, webhooks_router
import sentry_sdk

from app.services.cache.memory_cache import MemoryCacheService
from app.services.db.memory import MemoryConnectionService
from app.settings import settings

if not settings.debug and settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=1.0,
        profiles_sample_rate=1.0,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await MemoryCacheService().connect()
        await MemoryConnectionService().connect()
        yield
    finally:
        await MemoryCacheService().disconnect()
        await MemoryConnectionService().disconnect()


app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(meta_router)
app.include_router(prices_router)
app.include_router(alerts_router)
app.include_router(orders_router)
app.include_router(usage_router)
app.include_router(webhooks_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8123, reload=settings.debug)
