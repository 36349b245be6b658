"""Root logger setup for the CLI entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # httpx logs every request at INFO, including bearer-authenticated URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)
