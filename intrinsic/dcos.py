"""Directional-Change / Overshoot intrinsic event detector.

``DcOS`` receives one price tick at a time and returns an ``EventCode``:
+1/-1 for a Directional-Change (DC) event upward/downward, +2/-2 for an
Overshoot (OS) event upward/downward, 0 otherwise.

While ``mode == +1`` the detector follows a falling ask, waiting for the bid to
rebound by ``threshold_up`` (upward DC). While ``mode == -1`` it follows a
rising bid, waiting for the ask to drop by ``threshold_down`` (downward DC).
Each step of the followed trend by at least the overshoot size, measured from
``reference``, is an OS event.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Optional

from intrinsic.errors import InvalidPriceError, OutOfOrderTickError
from intrinsic.models import Direction, DetectorConfig, DetectorState, EventCode, Price
from intrinsic.moves import MoveCalculator, move_calculator

logger = logging.getLogger(__name__)


def _state_field(name: str, doc: str = "") -> property:
    def getter(self: "DcOS") -> Any:
        return getattr(self._state, name)

    def setter(self: "DcOS", value: Any) -> None:
        setattr(self._state, name, value)

    return property(getter, setter, doc=doc)


def _config_field(name: str) -> property:
    def getter(self: "DcOS") -> Any:
        return getattr(self._config, name)

    def setter(self: "DcOS", value: Any) -> None:
        self.config = dataclasses.replace(self._config, **{name: value})

    return property(getter, setter)


class DcOS:
    """Intrinsic event detector for a single price series.

    One instance per series, fed by a single writer in timestamp order.

    The properties mirror every state field and may be assigned to re-seed or
    resume a detector. Assignments bypass the transition logic, so keeping the
    state consistent is up to the caller.
    """

    def __init__(self, config: DetectorConfig, seed: Optional[Any] = None) -> None:
        self._config = config
        self._moves: MoveCalculator = move_calculator(config.relative_moves)
        self._state = DetectorState(mode=config.initial_mode)
        if seed is not None:
            self.seed(seed)

    @classmethod
    def from_state(cls, config: DetectorConfig, state: DetectorState) -> "DcOS":
        detector = cls(config)
        detector.restore(state)
        return detector

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------
    @property
    def config(self) -> DetectorConfig:
        return self._config

    @config.setter
    def config(self, config: DetectorConfig) -> None:
        self._config = config
        self._moves = move_calculator(config.relative_moves)

    @property
    def moves(self) -> MoveCalculator:
        return self._moves

    threshold_up = _config_field("threshold_up")
    threshold_down = _config_field("threshold_down")
    os_size_up = _config_field("os_size_up")
    os_size_down = _config_field("os_size_down")
    relative_moves = _config_field("relative_moves")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    extreme = _state_field("extreme", "Running local extreme of the followed trend.")
    prev_extreme = _state_field("prev_extreme", "Extreme confirmed by the latest DC event.")
    reference = _state_field("reference", "Anchor the next overshoot is measured from.")
    latest_dc_price = _state_field("latest_dc_price")
    prev_dc_price = _state_field("prev_dc_price")
    os_length = _state_field("os_length", "Length of the last completed overshoot.")
    initialized = _state_field("initialized")
    t_extreme = _state_field("t_extreme")
    t_dc_ie = _state_field("t_dc_ie")
    t_os_ie = _state_field("t_os_ie")
    t_prev_os = _state_field("t_prev_os")
    t_prev_dc_ie = _state_field("t_prev_dc_ie")
    t_os = _state_field("t_os")

    @property
    def mode(self) -> Direction:
        return self._state.mode

    @mode.setter
    def mode(self, value: int) -> None:
        if value not in (Direction.UP, Direction.DOWN):
            raise ValueError(f"mode must be +1 or -1, got {value!r}")
        self._state.mode = Direction(value)

    def snapshot(self) -> DetectorState:
        return dataclasses.replace(self._state)

    def restore(self, state: DetectorState) -> None:
        self._state = dataclasses.replace(state, mode=Direction(state.mode))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def seed(self, tick: Any) -> None:
        """Seed every price and time field from ``tick``.

        The seeding price is the ask while watching for an upward DC and the
        bid otherwise.
        """
        self._validate(tick)
        st = self._state
        price = tick.ask if st.mode == Direction.UP else tick.bid
        st.extreme = st.prev_extreme = st.reference = price
        st.prev_dc_price = st.latest_dc_price = price
        ts = tick.timestamp
        st.t_prev_os = st.t_prev_dc_ie = st.t_os = st.t_dc_ie = st.t_extreme = st.t_os_ie = ts
        st.t_last = ts
        st.initialized = True
        logger.debug("Detector seeded", extra={"price": price, "mode": int(st.mode)})

    def observe(self, tick: Any) -> EventCode:
        """Consume one tick and return the intrinsic event it triggers, if any.

        Ticks need ``ask``, ``bid`` and ``timestamp`` attributes. At most one
        event is returned per tick; an OS test only happens when the extreme
        improved, and the DC test only when it did not.
        """
        if not self._state.initialized:
            self.seed(tick)
            return EventCode.NONE

        self._validate(tick)
        st = self._state
        cfg = self._config
        ts = tick.timestamp
        st.t_last = ts

        mode = st.mode
        trend = Direction(-mode)
        if mode == Direction.UP:
            followed, confirming = tick.ask, tick.bid
            improved = followed < st.extreme
        else:
            followed, confirming = tick.bid, tick.ask
            improved = followed > st.extreme

        if improved:
            st.extreme = followed
            st.t_extreme = ts
            if self._moves.move_size(st.extreme, st.reference, trend) >= cfg.os_size(trend):
                st.reference = st.extreme
                st.t_os_ie = ts
                return self._emitted(EventCode(2 * trend))
            return EventCode.NONE

        if self._moves.move_size(confirming, st.extreme, mode) >= cfg.threshold(mode):
            st.os_length = self._moves.move_size(st.extreme, st.latest_dc_price, trend)
            st.t_prev_os = st.t_os
            st.t_prev_dc_ie = st.t_dc_ie
            st.t_os = st.t_extreme
            st.t_dc_ie = ts
            st.t_extreme = ts
            st.prev_dc_price = st.latest_dc_price
            st.latest_dc_price = confirming
            st.prev_extreme = st.extreme
            st.extreme = st.reference = confirming
            st.mode = trend
            return self._emitted(EventCode(int(mode)))

        return EventCode.NONE

    run = observe

    def deviation(self) -> float:
        """Squared difference between the last overshoot length and the DC threshold.

        The threshold is the one of the current mode. See "Bridging the gap
        between physical and intrinsic time" for the variability definition.
        """
        return (self._state.os_length - self._config.threshold(self._state.mode)) ** 2

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _validate(self, tick: Any) -> None:
        self._check_price("ask", tick.ask)
        self._check_price("bid", tick.bid)
        if self._config.check_order:
            last = self._state.t_last
            if last is not None and tick.timestamp < last:
                raise OutOfOrderTickError(tick.timestamp, last)

    def _check_price(self, field: str, value: Price) -> None:
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidPriceError(field, value, "is not finite")
        if self._config.relative_moves and value <= 0:
            raise InvalidPriceError(field, value, "must be positive for relative moves")

    def _emitted(self, code: EventCode) -> EventCode:
        if logger.isEnabledFor(logging.DEBUG):
            st = self._state
            logger.debug(
                "Intrinsic event",
                extra={
                    "code": int(code),
                    "extreme": st.extreme,
                    "reference": st.reference,
                    "mode": int(st.mode),
                },
            )
        return code

    def __repr__(self) -> str:
        st = self._state
        return (
            f"DcOS(mode={int(st.mode):+d}, extreme={st.extreme!r}, reference={st.reference!r}, "
            f"moves={self._moves.name}, initialized={st.initialized})"
        )
