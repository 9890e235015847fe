"""Intrinsic time event detection.

Turns a stream of bid/ask ticks into Directional-Change (DC) and Overshoot
(OS) events.
"""
from .dcos import DcOS
from .errors import IntrinsicEventError, InvalidPriceError, OutOfOrderTickError
from .models import DetectorConfig, DetectorState, Direction, EventCode, PriceTick
from .moves import AbsoluteMoves, MoveCalculator, RelativeMoves, move_calculator

__all__ = [
    "DcOS",
    "DetectorConfig",
    "DetectorState",
    "Direction",
    "EventCode",
    "PriceTick",
    "MoveCalculator",
    "AbsoluteMoves",
    "RelativeMoves",
    "move_calculator",
    "IntrinsicEventError",
    "InvalidPriceError",
    "OutOfOrderTickError",
]
