"""Logging setup shared by the API server and the headless CLI."""

from __future__ import annotations

import logging
import sys

# Third-party loggers that drown out game events at INFO
_NOISY = ("uvicorn.access", "httpx")


def setup_logging(level: str = "INFO") -> None:
    """Route all records to stdout as ``time [LEVEL] logger | message``.

    Safe to call more than once: the stdout handler is replaced, not stacked.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s",
        datefmt="%H:%M:%S",
    ))
    handler.set_name("minigames")

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for existing in list(root.handlers):
        if existing.get_name() == "minigames":
            root.removeHandler(existing)
    root.addHandler(handler)

    for name in _NOISY:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
