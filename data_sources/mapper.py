from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union

from core.logging import get_logger
from core.models import QuoteEvent

logger = get_logger(__name__)

# Accepted column names, first match wins. The short forms follow the
# Alpaca quote message keys.
_SYMBOL_KEYS = ("symbol", "S")
_TIME_KEYS = ("timestamp", "time", "t")
_BID_KEYS = ("bid", "bp")
_ASK_KEYS = ("ask", "ap")


def _first(record: Mapping[str, Any], keys: tuple) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    raise KeyError(keys[0])


def parse_timestamp(value: Any) -> datetime:
    """Parse ISO-8601 strings (a trailing ``Z`` means UTC) or epoch seconds.

    Eight-digit strings are ISO basic dates (YYYYMMDD); any other numeric
    string is epoch seconds.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    text = str(value).strip()
    if len(text) == 8 and text.isdigit():
        return datetime.strptime(text, "%Y%m%d").replace(tzinfo=timezone.utc)
    try:
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    except ValueError:
        pass
    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def scale_price(value: Any, price_scale: Optional[int]) -> Union[int, float]:
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(f"non-finite price {value!r}")
    if price_scale is None:
        return price
    return int(round(price * price_scale))


def map_record(
    record: Mapping[str, Any],
    source_name: str,
    price_scale: Optional[int] = None,
) -> Optional[QuoteEvent]:
    """Map one quote record to a QuoteEvent; malformed records map to None."""
    try:
        return QuoteEvent(
            symbol=str(_first(record, _SYMBOL_KEYS)).strip().upper(),
            bid=scale_price(_first(record, _BID_KEYS), price_scale),
            ask=scale_price(_first(record, _ASK_KEYS), price_scale),
            timestamp=parse_timestamp(_first(record, _TIME_KEYS)),
            source_name=source_name,
            raw=dict(record),
        )
    except KeyError as exc:
        logger.debug("Skipping record without %s", exc.args[0], extra={"record": dict(record)})
    except (TypeError, ValueError, OverflowError):
        logger.debug("Skipping malformed record", extra={"record": dict(record)})
    return None


def map_message(raw: str, source_name: str, price_scale: Optional[int] = None) -> List[QuoteEvent]:
    """Map a JSON object or list of objects to QuoteEvents."""
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Skipping non-JSON message")
        return []

    if not isinstance(payload, list):
        payload = [payload]

    events: List[QuoteEvent] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        # Alpaca control messages, e.g. {"T":"success","msg":"connected"}
        if item.get("T") not in (None, "q"):
            continue
        event = map_record(item, source_name, price_scale)
        if event is not None:
            events.append(event)
    return events

