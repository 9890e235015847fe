from __future__ import annotations

import abc
from typing import List, Optional

from core.models import Detection, MarketEvent


class Detector(abc.ABC):
    name: str

    @abc.abstractmethod
    async def on_event(self, event: MarketEvent) -> List[Detection]:  # pragma: no cover - interface
        ...

    def reset(self, symbol: Optional[str] = None) -> None:
        """Drop per-symbol state; all symbols when ``symbol`` is None."""
