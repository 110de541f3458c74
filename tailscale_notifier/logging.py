from __future__ import annotations

import logging
import sys
from typing import Iterable

APP_LOGGER = "tailscale_notifier"

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def app_logger() -> logging.Logger:
    return logging.getLogger(APP_LOGGER)


class ConsoleLog:
    """
    Route run output to the console.

    Diagnostics (device status lines, fetch URL, Pushover response) go to
    stdout and are dropped when ``quiet`` is set. ERROR and above always go
    to stderr, so a cron mail still carries the reason a run failed.
    """

    def __init__(self, level: str = "INFO", quiet: bool = False, debug_modules: Iterable[str] | None = None):
        self.level = getattr(logging, level.strip().upper(), logging.INFO)
        self.quiet = quiet
        self.debug_modules = list(debug_modules or [])

    def _handler(self, stream, level: int) -> logging.Handler:
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        return handler

    def setup(self) -> logging.Logger:
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(logging.DEBUG)

        if not self.quiet:
            diagnostics = self._handler(sys.stdout, self.level)
            diagnostics.addFilter(_BelowError())
            root.addHandler(diagnostics)

        root.addHandler(self._handler(sys.stderr, logging.ERROR))

        for name in self.debug_modules:
            logging.getLogger(name).setLevel(logging.DEBUG)

        return app_logger()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
