from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import IntEnum
from typing import Any, Dict, Optional, Union

Price = Union[int, float]


class Direction(IntEnum):
    UP = 1
    DOWN = -1


class EventCode(IntEnum):
    OS_DOWN = -2
    DC_DOWN = -1
    NONE = 0
    DC_UP = 1
    OS_UP = 2

    @property
    def is_dc(self) -> bool:
        return abs(self) == 1

    @property
    def is_os(self) -> bool:
        return abs(self) == 2

    @property
    def direction(self) -> Optional[Direction]:
        if self == EventCode.NONE:
            return None
        return Direction.UP if self > 0 else Direction.DOWN


@dataclass(frozen=True)
class PriceTick:
    ask: Price
    bid: Price
    timestamp: Any


@dataclass(frozen=True)
class DetectorConfig:
    """Construction parameters of a DcOS detector.

    Thresholds and overshoot sizes are fractions (0.01 == 1%) when
    ``relative_moves`` is set and price units otherwise. Non-positive values
    are accepted and make every qualifying tick an event.
    """

    threshold_up: float
    threshold_down: float
    os_size_up: float
    os_size_down: float
    initial_mode: int = Direction.UP
    relative_moves: bool = True
    check_order: bool = False

    def __post_init__(self) -> None:
        if self.initial_mode not in (Direction.UP, Direction.DOWN):
            raise ValueError(f"initial_mode must be +1 or -1, got {self.initial_mode!r}")
        object.__setattr__(self, "initial_mode", Direction(self.initial_mode))

    def threshold(self, direction: int) -> float:
        return self.threshold_up if direction == Direction.UP else self.threshold_down

    def os_size(self, direction: int) -> float:
        return self.os_size_up if direction == Direction.UP else self.os_size_down


@dataclass
class DetectorState:
    mode: Direction
    extreme: Optional[Price] = None
    prev_extreme: Optional[Price] = None
    reference: Optional[Price] = None
    latest_dc_price: Optional[Price] = None
    prev_dc_price: Optional[Price] = None
    os_length: float = 0.0
    initialized: bool = False
    # times of the tipping points of intrinsic time
    t_extreme: Any = None
    t_dc_ie: Any = None
    t_os_ie: Any = None
    t_prev_os: Any = None
    t_prev_dc_ie: Any = None
    t_os: Any = None
    # last observed timestamp, only used for ordering checks
    t_last: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = int(self.mode)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectorState":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "mode" not in values:
            raise ValueError("state is missing 'mode'")
        values["mode"] = Direction(int(values["mode"]))
        return cls(**values)
