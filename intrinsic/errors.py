from __future__ import annotations

from typing import Any


class IntrinsicEventError(ValueError):
    """Base class for malformed input rejected by the detector."""


class InvalidPriceError(IntrinsicEventError):
    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r} {reason}")


class OutOfOrderTickError(IntrinsicEventError):
    def __init__(self, timestamp: Any, last: Any) -> None:
        self.timestamp = timestamp
        self.last = last
        super().__init__(f"tick timestamp {timestamp!r} precedes last observed {last!r}")
