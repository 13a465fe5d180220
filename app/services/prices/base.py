from abc import ABC, abstractmethod
from typing import Optional

import httpx

from app.models.prices import AssetType, Quote


class UnknownSymbolError(Exception):
    pass


class BasePriceProvider(ABC):
    asset_type: AssetType

    def normalize_symbol(self, symbol: str) -> str:
        return symbol.strip()

    def display_symbol(self, symbol: str) -> str:
        return self.normalize_symbol(symbol).upper()

    def cache_key(self, symbol: str) -> str:
        return f"{self.asset_type}:{self.normalize_symbol(symbol)}"

    @abstractmethod
    async def fetch_quote(self, symbol: str, client: httpx.AsyncClient) -> Optional[Quote]:
        """Returns None when the upstream has no price for the symbol."""
        raise NotImplementedError()
