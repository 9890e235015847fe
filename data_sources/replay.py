from __future__ import annotations

import csv
from pathlib import Path
from typing import AsyncIterator, Iterable, Iterator, Optional, Set, TextIO, Union

from core.logging import get_logger
from core.models import QuoteEvent
from data_sources.base import MarketDataSource
from data_sources.mapper import map_message, map_record

logger = get_logger(__name__)

JSON_SUFFIXES = {".jsonl", ".ndjson", ".json"}


class CsvReplaySource(MarketDataSource):
    """Replays quotes recorded in a file, in file order.

    CSV files need a header with symbol, timestamp, bid and ask columns.
    Files ending in .jsonl/.ndjson/.json hold one JSON quote (or list of
    quotes) per line. Records that do not map to a quote are skipped.
    """

    name = "replay"

    def __init__(
        self,
        path: Union[str, Path],
        symbols: Optional[Iterable[str]] = None,
        price_scale: Optional[int] = None,
    ) -> None:
        self.path = Path(path)
        self.symbols: Optional[Set[str]] = {s.upper() for s in symbols} if symbols else None
        self.price_scale = price_scale
        self._fh: Optional[TextIO] = None
        self.skipped = 0

    async def connect(self) -> None:
        if self._fh is None:
            self._fh = self.path.open("r", encoding="utf-8-sig", newline="")
            logger.info("Opened replay file", extra={"path": str(self.path)})

    async def stream(self) -> AsyncIterator[QuoteEvent]:
        if self._fh is None:
            await self.connect()
        fh = self._fh
        if fh is None:
            raise RuntimeError(f"Replay file {self.path} is not open")
        for event in self._events(fh):
            if self.symbols is not None and event.symbol not in self.symbols:
                continue
            yield event

    def _events(self, fh: TextIO) -> Iterator[QuoteEvent]:
        if self.path.suffix.lower() in JSON_SUFFIXES:
            for line in fh:
                if not line.strip():
                    continue
                events = map_message(line, source_name=self.name, price_scale=self.price_scale)
                if not events:
                    self.skipped += 1
                yield from events
            return

        for row in csv.DictReader(fh):
            event = map_record(row, source_name=self.name, price_scale=self.price_scale)
            if event is None:
                self.skipped += 1
                continue
            yield event

    async def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
            logger.info("Closed replay file", extra={"path": str(self.path), "skipped": self.skipped})
