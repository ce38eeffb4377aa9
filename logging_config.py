from __future__ import annotations

import logging
import sys

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level_name: str = "INFO") -> None:
    """Attach a single console handler to the root logger.

    Streamlit re-executes the script on every interaction, so repeated calls
    are ignored once a handler is installed.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    _CONFIGURED = True
