import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from core.models import MarketEvent, QuoteEvent
from detectors.intrinsic_detector import IntrinsicEventDetector
from detectors.registry import build_detectors
from intrinsic import DetectorConfig, InvalidPriceError

T0 = datetime(2024, 1, 2, tzinfo=timezone.utc)


def quote(symbol, bid, ask, seconds):
    return QuoteEvent(symbol=symbol, bid=bid, ask=ask, timestamp=T0 + timedelta(seconds=seconds), source_name="test")


def make_detector(**overrides):
    args = dict(
        threshold_up=1.0,
        threshold_down=1.0,
        os_size_up=2.0,
        os_size_down=2.0,
        relative_moves=False,
    )
    args.update(overrides)
    return IntrinsicEventDetector(**args)


def feed(detector, events):
    return [asyncio.run(detector.on_event(event)) for event in events]


def test_intrinsic_detector_emits_os_and_dc():
    detector = make_detector()
    results = feed(
        detector,
        [
            quote("EURUSD", 100.0, 100.0, 0),
            quote("EURUSD", 99.0, 99.0, 1),
            quote("EURUSD", 97.0, 97.0, 2),
            quote("EURUSD", 98.5, 99.0, 3),
        ],
    )
    assert [len(r) for r in results] == [0, 0, 1, 1]

    os_event = results[2][0]
    assert os_event.detector_name == "intrinsic_events"
    assert os_event.severity == "info"
    assert os_event.data["code"] == -2
    assert os_event.data["kind"] == "OS"
    assert os_event.data["direction"] == "down"
    assert os_event.data["extreme"] == 97.0

    dc_event = results[3][0]
    assert dc_event.severity == "warning"
    assert dc_event.data["code"] == 1
    assert dc_event.data["mode"] == -1
    assert dc_event.data["os_length"] == 3.0
    assert dc_event.data["deviation"] == 4.0
    assert dc_event.timestamp == T0 + timedelta(seconds=3)


def test_symbols_have_independent_engines():
    detector = make_detector()
    feed(detector, [quote("AAA", 100.0, 100.0, 0), quote("BBB", 50.0, 50.0, 0)])
    results = feed(detector, [quote("AAA", 97.0, 97.0, 1), quote("BBB", 49.0, 49.0, 1)])

    assert results[0][0].symbol == "AAA"
    assert results[1] == []
    assert detector.engine("AAA").extreme == 97.0
    assert detector.engine("BBB").extreme == 49.0
    assert sorted(detector.symbols) == ["AAA", "BBB"]

    detector.reset("AAA")
    assert detector.engine("AAA") is None
    detector.reset()
    assert detector.symbols == []


def test_non_quote_events_are_ignored():
    detector = make_detector()
    event = MarketEvent(symbol="AAPL", timestamp=T0, source_name="test")
    assert asyncio.run(detector.on_event(event)) == []
    assert detector.symbols == []


def test_invalid_prices_propagate():
    detector = make_detector(relative_moves=True, threshold_up=0.01, threshold_down=0.01)
    feed(detector, [quote("AAA", 100.0, 100.1, 0)])
    with pytest.raises(InvalidPriceError):
        feed(detector, [quote("AAA", 0.0, 100.1, 1)])


def test_registry_builds_configured_detectors():
    config = DetectorConfig(2.0, 2.0, 3.0, 3.0, initial_mode=-1, relative_moves=False)
    (shared,) = build_detectors(["intrinsic_events"], config=config)
    assert shared.config is config

    (custom,) = build_detectors(
        [{"name": "intrinsic_events", "args": {"threshold_up": 5.0, "initial_mode": -1}}],
        relative_moves=False,
    )
    assert custom.config.threshold_up == 5.0
    assert custom.config.threshold_down == 0.01
    assert custom.config.initial_mode == -1
    assert custom.config.relative_moves is False


def test_registry_rejects_unknown_detector():
    with pytest.raises(ValueError):
        build_detectors(["zigzag"])
