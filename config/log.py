"""Logging setup for ParkSettle."""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process.

    Streamlit re-executes the script on every interaction, so repeated calls
    only adjust the level instead of stacking handlers.
    """

    root = logging.getLogger()
    resolved = getattr(logging, level.upper(), logging.INFO)
    if not root.handlers:
        logging.basicConfig(format=_LOG_FORMAT, stream=sys.stdout, level=resolved)
    else:
        root.setLevel(resolved)

    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
