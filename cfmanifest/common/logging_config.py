"""Package logger. Writes to stderr so stdout stays reserved for the manifest."""

import logging
import sys

LOGGER = logging.getLogger("cfmanifest")


def configure_logging(level: str = "WARNING") -> logging.Logger:
    if not LOGGER.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        LOGGER.addHandler(handler)
    LOGGER.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return LOGGER
