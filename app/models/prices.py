import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class AssetType(str, Enum):
    CRYPTO = "crypto"
    STOCK = "stock"
    FOREX = "forex"

    def __str__(self):
        return self.value


class AlertCondition(str, Enum):
    ABOVE = "above"
    BELOW = "below"

    def __str__(self):
        return self.value


class PriceResDTO(BaseModel):
    type: AssetType
    symbol: str
    price: float
    currency: str = "USD"
    timestamp: datetime.datetime


class AlertCheckDTO(BaseModel):
    type: AssetType
    symbol: str = Field(min_length=1)
    condition: str
    threshold: float


class AlertCheckResDTO(BaseModel):
    symbol: str
    price: float
    threshold: float
    condition: AlertCondition
    triggered: bool
    message: str
    timestamp: datetime.datetime


class BatchItem(BaseModel):
    type: AssetType
    symbol: str = Field(min_length=1)


class BatchPriceDTO(BaseModel):
    symbols: List[BatchItem]


class BatchResultItem(BaseModel):
    type: AssetType
    symbol: str
    price: Optional[float] = None
    error: bool


class BatchPriceResDTO(BaseModel):
    results: List[BatchResultItem]
    timestamp: datetime.datetime


class GasPrices(BaseModel):
    slow: int
    standard: int
    fast: int
    rapid: int
    unit: str = "gwei"
    note: Optional[str] = None


class Quote(BaseModel):
    type: AssetType
    symbol: str
    price: float
    currency: str = "USD"
