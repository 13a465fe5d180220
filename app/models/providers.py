from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, RootModel


class CoinGeckoPrice(BaseModel):
    usd: Optional[float] = None


class CoinGeckoSimplePrice(RootModel[Dict[str, CoinGeckoPrice]]):
    """``/simple/price`` body, keyed by coin id."""

    def usd(self, coin_id: str) -> Optional[float]:
        price = self.root.get(coin_id)
        return price.usd if price else None


class YahooChartMeta(BaseModel):
    regularMarketPrice: Optional[float] = None
    currency: Optional[str] = None


class YahooChartResult(BaseModel):
    meta: YahooChartMeta = YahooChartMeta()


class YahooChart(BaseModel):
    result: Optional[List[YahooChartResult]] = None


class YahooChartResponse(BaseModel):
    chart: YahooChart = YahooChart()


class ExchangeRatesResponse(BaseModel):
    result: Optional[str] = None
    rates: Dict[str, float] = {}


class GasNowData(BaseModel):
    """Gas prices in wei."""
    model_config = ConfigDict(extra="ignore")

    slow: float
    standard: float
    fast: float
    rapid: float


class GasNowResponse(BaseModel):
    data: Optional[GasNowData] = None
