import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
ENGINE_LOGGER = "intrinsic"


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    engine_level: Optional[str] = None,
) -> None:
    """Install a single handler on the root logger.

    Logs go to stderr unless another stream is given; stdout carries replay
    output. ``engine_level`` overrides the level of the detector engine, which
    logs every event at DEBUG.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(level.upper())
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)

    engine = logging.getLogger(ENGINE_LOGGER)
    engine.setLevel(engine_level.upper() if engine_level else logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
