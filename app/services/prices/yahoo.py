from typing import Optional

import httpx

from app.models.prices import AssetType, Quote
from app.models.providers import YahooChartResponse
from app.services.prices.base import BasePriceProvider
from app.settings import settings


class YahooFinancePriceProvider(BasePriceProvider):
    asset_type = AssetType.STOCK
    api_url = settings.prices.yahoo_url
    # the chart endpoint rejects requests without a browser user agent
    headers = {"User-Agent": "Mozilla/5.0"}

    def normalize_symbol(self, symbol: str) -> str:
        return symbol.strip().upper()

    async def fetch_quote(self, symbol: str, client: httpx.AsyncClient) -> Optional[Quote]:
        ticker = self.normalize_symbol(symbol)
        response = await client.get(
            f"{self.api_url}/chart/{ticker}",
            params={"interval": "1d", "range": "1d"},
            headers=self.headers,
        )
        response.raise_for_status()
        results = YahooChartResponse.model_validate(response.json()).chart.result
        if not results:
            return None
        meta = results[0].meta
        if not meta.regularMarketPrice:
            return None
        return Quote(
            type=self.asset_type,
            symbol=ticker,
            price=meta.regularMarketPrice,
            currency=meta.currency or "USD",
        )
