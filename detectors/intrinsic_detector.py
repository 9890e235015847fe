from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.logging import get_logger
from core.models import Detection, MarketEvent, QuoteEvent
from detectors.base import Detector
from intrinsic import DcOS, DetectorConfig, EventCode

logger = get_logger(__name__)


class IntrinsicEventDetector(Detector):
    """
    Directional-Change / Overshoot detector over quote events.

    Keeps one DcOS engine per symbol, created on the symbol's first quote,
    which only seeds it. Every later quote runs through the engine and each
    non-zero event code becomes a Detection:

      +1 / -1  DC up / down  (severity "warning")
      +2 / -2  OS up / down  (severity "info")
    """

    name = "intrinsic_events"

    def __init__(
        self,
        *,
        threshold_up: float = 0.01,
        threshold_down: float = 0.01,
        os_size_up: float = 0.01,
        os_size_down: float = 0.01,
        initial_mode: int = 1,
        relative_moves: bool = True,
        check_order: bool = False,
        config: Optional[DetectorConfig] = None,
    ) -> None:
        self.config = config or DetectorConfig(
            threshold_up=threshold_up,
            threshold_down=threshold_down,
            os_size_up=os_size_up,
            os_size_down=os_size_down,
            initial_mode=initial_mode,
            relative_moves=relative_moves,
            check_order=check_order,
        )
        self._engines: Dict[str, DcOS] = {}

    def engine(self, symbol: str) -> Optional[DcOS]:
        return self._engines.get(symbol)

    @property
    def symbols(self) -> List[str]:
        return list(self._engines)

    def reset(self, symbol: Optional[str] = None) -> None:
        if symbol is None:
            self._engines.clear()
        else:
            self._engines.pop(symbol, None)

    async def on_event(self, event: MarketEvent) -> List[Detection]:
        if not isinstance(event, QuoteEvent):
            return []

        engine = self._engines.get(event.symbol)
        if engine is None:
            engine = DcOS(self.config, seed=event.to_tick())
            self._engines[event.symbol] = engine
            logger.debug("Seeded engine", extra={"symbol": event.symbol})
            return []

        code = engine.observe(event.to_tick())
        if code == EventCode.NONE:
            return []
        return [self._detection(event, engine, code)]

    def _detection(self, event: QuoteEvent, engine: DcOS, code: EventCode) -> Detection:
        kind = "DC" if code.is_dc else "OS"
        direction = "up" if code > 0 else "down"
        data: Dict[str, Any] = {
            "code": int(code),
            "kind": kind,
            "direction": direction,
            "extreme": engine.extreme,
            "reference": engine.reference,
            "mode": int(engine.mode),
            "os_length": engine.os_length,
            "bid": event.bid,
            "ask": event.ask,
        }
        if code.is_dc:
            data["deviation"] = engine.deviation()
            data["prev_extreme"] = engine.prev_extreme
            data["t_prev_dc_ie"] = engine.t_prev_dc_ie
        return Detection(
            symbol=event.symbol,
            detector_name=self.name,
            severity="warning" if code.is_dc else "info",
            message=f"{kind} {direction} at {engine.extreme} ({int(code):+d})",
            timestamp=event.timestamp,
            data=data,
        )
