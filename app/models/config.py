from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ThrottlingPeriod(str, Enum):
    HOURLY = ("hourly", 60 * 60)
    DAILY = ("daily", 24 * 60 * 60)

    def __new__(cls, value, seconds):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.seconds = seconds
        return obj

    def __str__(self):
        return self.value


class ThrottlingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int
    period: ThrottlingPeriod


class PaymentConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_url: str = "https://api.cryptapi.io"
    ticker: str = "polygon/usdt"
    asset: str = "USDT"
    network: str = "Polygon"
    wallet_address: str = ""
    timeout: float = 10
    # share of the plan price that has to arrive before the order is confirmed
    confirmation_tolerance: float = Field(default=0.95, gt=0, le=1)


class ApiKeyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    prefix: str = "pa_"
    validity_days: int = 30
    header_name: str = "X-API-Key"


class PricesConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    cache_ttl: int = 60
    gas_cache_ttl: int = 30
    timeout: float = 5
    batch_max: int = 10
    coingecko_url: str = "https://api.coingecko.com/api/v3"
    yahoo_url: str = "https://query1.finance.yahoo.com/v8/finance"
    forex_url: str = "https://open.er-api.com/v6"
    gas_url: str = "https://beaconcha.in/api/v1/execution/gasnow"
