"""Logger factory shared by every module.

Diagnostics always go to stderr: stdout belongs to the poller.
"""

import logging
import os
import sys

LOG_LEVEL_ENV = "CACTIWMI_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("cactiwmi")
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the `cactiwmi` hierarchy."""
    _configure_root()
    if not name.startswith("cactiwmi"):
        name = f"cactiwmi.{name}"
    return logging.getLogger(name)
