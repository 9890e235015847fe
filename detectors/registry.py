from __future__ import annotations

from typing import Any, Dict, Iterable, List, Type, Union

from detectors.base import Detector
from detectors.intrinsic_detector import IntrinsicEventDetector

REGISTERED_DETECTORS: Dict[str, Type[Detector]] = {
    IntrinsicEventDetector.name: IntrinsicEventDetector,
}

DetectorSpec = Union[str, Dict[str, Any]]


def build_detectors(specs: Iterable[DetectorSpec], **defaults: Any) -> List[Detector]:
    """Instantiate detectors from names or ``{"name": ..., "args": {...}}`` specs.

    ``defaults`` are passed to every detector; per-spec ``args`` win.
    """
    detectors: List[Detector] = []
    for spec in specs:
        if isinstance(spec, str):
            name = spec
            args: Dict[str, Any] = {}
        else:
            name = spec["name"]
            args = spec.get("args", {})

        cls = REGISTERED_DETECTORS.get(name)
        if not cls:
            raise ValueError(f"Unknown detector {name}")

        detectors.append(cls(**{**defaults, **args}))
    return detectors
