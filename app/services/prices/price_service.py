import asyncio
from typing import Dict, List, Optional

import httpx
import sentry_sdk
import structlog

from app.models.prices import AssetType, BatchItem, BatchResultItem, GasPrices, Quote
from app.models.providers import GasNowResponse
from app.services.cache.base import BaseCacheService
from app.services.prices.base import BasePriceProvider, UnknownSymbolError
from app.services.prices.coingecko import CoinGeckoPriceProvider
from app.services.prices.forex import ForexPriceProvider
from app.services.prices.yahoo import YahooFinancePriceProvider
from app.settings import settings

logger = structlog.get_logger(__name__)


class PriceService:
    _cache_price_key = "prices"
    _cache_gas_key = "gas"
    gas_estimate = GasPrices(slow=15, standard=25, fast=40, rapid=60, note="estimated")

    def __init__(self, cache: BaseCacheService, providers: Optional[Dict[AssetType, BasePriceProvider]] = None):
        self.cache = cache
        self.providers = providers or {
            AssetType.CRYPTO: CoinGeckoPriceProvider(),
            AssetType.STOCK: YahooFinancePriceProvider(),
            AssetType.FOREX: ForexPriceProvider(),
        }

    def get_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.prices.timeout)

    def _price_key(self, provider: BasePriceProvider, symbol: str) -> str:
        return f"{self._cache_price_key}:{provider.cache_key(symbol)}"

    async def _fetch_quote(self, provider: BasePriceProvider, symbol: str) -> Optional[Quote]:
        try:
            async with self.get_http_client() as client:
                return await provider.fetch_quote(symbol, client)
        except UnknownSymbolError:
            logger.info("Unsupported symbol", type=provider.asset_type, symbol=symbol)
            return None
        except (httpx.HTTPError, ValueError) as e:
            # upstream outages read as "no price" to the caller
            logger.warning("Price lookup failed", type=provider.asset_type, symbol=symbol, error=repr(e))
            return None

    async def get_quote(self, asset_type: AssetType, symbol: str) -> Optional[Quote]:
        provider = self.providers[asset_type]
        key = self._price_key(provider, symbol)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        quote = await self._fetch_quote(provider, symbol)
        if quote is not None:
            await self.cache.set(key, quote, ttl=settings.prices.cache_ttl)
        return quote

    async def get_batch(self, items: List[BatchItem]) -> List[BatchResultItem]:
        items = items[:settings.prices.batch_max]
        quotes = await asyncio.gather(*(self.get_quote(item.type, item.symbol) for item in items))
        return [
            BatchResultItem(
                type=item.type,
                symbol=quote.symbol if quote else self.providers[item.type].display_symbol(item.symbol),
                price=quote.price if quote else None,
                error=quote is None,
            )
            for item, quote in zip(items, quotes)
        ]

    async def get_gas_prices(self) -> GasPrices:
        cached = await self.cache.get(self._cache_gas_key)
        if cached is not None:
            return cached
        try:
            async with self.get_http_client() as client:
                response = await client.get(settings.prices.gas_url)
                response.raise_for_status()
                data = GasNowResponse.model_validate(response.json()).data
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Gas price lookup failed, using estimate", error=repr(e))
            sentry_sdk.capture_exception(e)
            return self.gas_estimate
        if data is None:
            logger.warning("Gas price response without data, using estimate")
            return self.gas_estimate
        gas = GasPrices(
            slow=round(data.slow / 1e9),
            standard=round(data.standard / 1e9),
            fast=round(data.fast / 1e9),
            rapid=round(data.rapid / 1e9),
        )
        await self.cache.set(self._cache_gas_key, gas, ttl=settings.prices.gas_cache_ttl)
        return gas
