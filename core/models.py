from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from intrinsic.models import PriceTick


@dataclass
class MarketEvent:
    symbol: str
    timestamp: datetime
    source_name: str
    raw: Optional[Dict[str, Any]] = field(default=None, kw_only=True)


@dataclass
class QuoteEvent(MarketEvent):
    bid: Union[int, float]
    ask: Union[int, float]

    def to_tick(self) -> PriceTick:
        return PriceTick(ask=self.ask, bid=self.bid, timestamp=self.timestamp)


@dataclass
class Detection:
    symbol: str
    detector_name: str
    severity: str
    message: str
    timestamp: datetime
    data: Dict[str, Any]
