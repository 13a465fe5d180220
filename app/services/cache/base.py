from abc import ABC, abstractmethod
from typing import Any

from app.utils.singleton import AbstractSingleton


class BaseCacheService(ABC, metaclass=AbstractSingleton):
    @abstractmethod
    async def get(self, key: str):
        raise NotImplementedError()

    @abstractmethod
    async def set(self, key: str, value: Any, *args, **kwargs):
        raise NotImplementedError()
