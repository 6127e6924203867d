"""Logging configuration."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)7s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("urllib3", "asyncio", "playwright")


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for CLI use.

    Args:
        verbose: Enable DEBUG level output (including third-party loggers).
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


__all__ = ["setup_logging", "LOG_FORMAT"]
