from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from core.config import Settings
from core.logging import get_logger
from core.models import Detection
from data_sources.base import MarketDataSource
from data_sources.replay import CsvReplaySource
from detectors.base import Detector
from detectors.registry import build_detectors

logger = get_logger(__name__)

DetectionHandler = Callable[[Detection], None]


@dataclass
class ReplaySummary:
    quotes: int = 0
    detections: List[Detection] = field(default_factory=list)
    counts: Counter = field(default_factory=Counter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quotes": self.quotes,
            "events": len(self.detections),
            "counts": {str(code): n for code, n in sorted(self.counts.items())},
        }


async def run_replay(
    source: MarketDataSource,
    detectors: Iterable[Detector],
    on_detection: Optional[DetectionHandler] = None,
) -> ReplaySummary:
    """Feed every event of ``source`` to every detector, in stream order."""
    detector_list = list(detectors)
    summary = ReplaySummary()

    async with source:
        async for event in source.stream():
            summary.quotes += 1
            for detector in detector_list:
                for detection in await detector.on_event(event):
                    summary.detections.append(detection)
                    summary.counts[detection.data.get("code", 0)] += 1
                    if on_detection is not None:
                        on_detection(detection)

    logger.info("Replay finished", extra=summary.to_dict())
    return summary


def replay_file(
    settings: Settings,
    path: Union[str, Path],
    symbols: Optional[Iterable[str]] = None,
    on_detection: Optional[DetectionHandler] = None,
) -> ReplaySummary:
    detectors = build_detectors(["intrinsic_events"], config=settings.detector_config())
    source = CsvReplaySource(path, symbols=symbols, price_scale=settings.price_scale)
    logger.info(
        "Starting replay",
        extra={"path": str(path), "relative_moves": settings.relative_moves},
    )
    return asyncio.run(run_replay(source, detectors, on_detection=on_detection))
