# File: taskmaster/core/logging_setup.py

import logging
import sys


class _NoiseFilter(logging.Filter):
    """
    Keep taskmaster logs and uvicorn's own lines; other third-party
    loggers only come through at WARNING and above.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("taskmaster") or name.startswith("uvicorn"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = "INFO") -> None:
    """
    Configure the root logger with a single console handler.

    Safe to call more than once: existing handlers are replaced.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_NoiseFilter())
    root.addHandler(ch)

    logging.captureWarnings(True)
