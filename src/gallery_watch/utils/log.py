from __future__ import annotations

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def setup_logging(level: str | int = "INFO") -> None:
    """Send package and Scrapy logs to stderr with a single timestamped handler.

    Selenium's connection pool chatter is kept at WARNING so INFO runs only
    show the watch steps.
    """
    if isinstance(level, str):
        resolved = getattr(logging, level.upper(), None)
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    for noisy in ("selenium", "urllib3", "scrapy"):
        logging.getLogger(noisy).setLevel(max(logging.WARNING, root.level))
