from typing import Optional

import httpx

from app.models.prices import AssetType, Quote
from app.models.providers import CoinGeckoSimplePrice
from app.services.prices.base import BasePriceProvider
from app.settings import settings


class CoinGeckoPriceProvider(BasePriceProvider):
    asset_type = AssetType.CRYPTO
    api_url = settings.prices.coingecko_url

    def normalize_symbol(self, symbol: str) -> str:
        # coingecko ids are lowercase, e.g. "bitcoin"
        return symbol.strip().lower()

    async def fetch_quote(self, symbol: str, client: httpx.AsyncClient) -> Optional[Quote]:
        coin_id = self.normalize_symbol(symbol)
        response = await client.get(
            f"{self.api_url}/simple/price",
            params={"ids": coin_id, "vs_currencies": "usd"}
        )
        response.raise_for_status()
        price = CoinGeckoSimplePrice.model_validate(response.json()).usd(coin_id)
        if not price:
            return None
        return Quote(type=self.asset_type, symbol=self.display_symbol(symbol), price=price)
