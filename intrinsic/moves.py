"""Price-move arithmetic shared by the detector state machine.

Absolute moves suit prices following an arithmetic Brownian motion; relative
(log-ratio) moves suit prices that scale multiplicatively, as under a
geometric Brownian motion.
"""

from __future__ import annotations

import math
from typing import Protocol

from intrinsic.models import Price


class MoveCalculator(Protocol):
    name: str

    def move_size(self, a: Price, b: Price, direction: int) -> float:  # pragma: no cover - interface
        ...


class AbsoluteMoves:
    name = "absolute"

    def move_size(self, a: Price, b: Price, direction: int) -> float:
        return direction * (a - b)


class RelativeMoves:
    name = "relative"

    def move_size(self, a: Price, b: Price, direction: int) -> float:
        return direction * math.log(a / b)


ABSOLUTE = AbsoluteMoves()
RELATIVE = RelativeMoves()


def move_calculator(relative: bool) -> MoveCalculator:
    return RELATIVE if relative else ABSOLUTE
