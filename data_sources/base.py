from __future__ import annotations

import abc
from typing import AsyncIterator

from core.models import MarketEvent


class MarketDataSource(abc.ABC):
    name: str

    @abc.abstractmethod
    async def connect(self) -> None:  # pragma: no cover - interface
        ...

    @abc.abstractmethod
    def stream(self) -> AsyncIterator[MarketEvent]:  # pragma: no cover - interface
        ...

    @abc.abstractmethod
    async def close(self) -> None:  # pragma: no cover - interface
        ...

    async def __aenter__(self) -> "MarketDataSource":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False
