from typing import Optional, Tuple

import httpx

from app.models.prices import AssetType, Quote
from app.models.providers import ExchangeRatesResponse
from app.services.prices.base import BasePriceProvider, UnknownSymbolError
from app.settings import settings


class ForexPriceProvider(BasePriceProvider):
    """
    Accepts "EURUSD", "EUR-USD", "EUR/USD" or a bare "EUR" (quoted in USD).
    """
    asset_type = AssetType.FOREX
    api_url = settings.prices.forex_url
    default_quote = "USD"

    def normalize_symbol(self, symbol: str) -> str:
        return "".join(c for c in symbol.upper() if c.isalpha())

    def split_pair(self, symbol: str) -> Tuple[str, str]:
        pair = self.normalize_symbol(symbol)
        if len(pair) == 3:
            return pair, self.default_quote
        if len(pair) == 6:
            return pair[:3], pair[3:]
        raise UnknownSymbolError(symbol)

    async def fetch_quote(self, symbol: str, client: httpx.AsyncClient) -> Optional[Quote]:
        base, quote = self.split_pair(symbol)
        response = await client.get(f"{self.api_url}/latest/{base}")
        response.raise_for_status()
        data = ExchangeRatesResponse.model_validate(response.json())
        if data.result != "success":
            return None
        rate = data.rates.get(quote)
        if not rate:
            return None
        return Quote(type=self.asset_type, symbol=f"{base}{quote}", price=rate, currency=quote)
