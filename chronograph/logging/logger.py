"""
Structured logging utilities for chronograph.

The stdlib sink and the library's own diagnostics use these helpers so that
records carry the properties pushed while a chronograph is closing.

Record fields always present on loggers returned by ``get_logger``:
- properties (dict of the pushed context properties)
- message_template (the unrendered template, or None)
- template_properties (values bound to template placeholders, or None)
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

from chronograph.config import settings
from chronograph.logging.context import current_properties

_LOGGER_INITIALIZED = False

VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

# LogRecord attributes a pushed property must never overwrite.
_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "properties", "message_template", "template_properties"}


# -----------------------------------------------------------------------------
# 1. LOAD LOGGING.YAML
# -----------------------------------------------------------------------------
def _load_logging_yaml() -> None:
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    cfg_path = Path(settings.LOGGING_YAML)
    if cfg_path.exists():
        config = settings.load_yaml(str(cfg_path))
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(level=settings.LOG_LEVEL)

    _LOGGER_INITIALIZED = True


# -----------------------------------------------------------------------------
# 2. CONTEXT FILTER (pushed properties)
# -----------------------------------------------------------------------------
class ChronographContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        properties = current_properties()
        record.properties = {**properties, **getattr(record, "properties", {})}

        for name, value in properties.items():
            if name not in _RESERVED_RECORD_ATTRS and not hasattr(record, name):
                setattr(record, name, value)

        for attr in ("message_template", "template_properties"):
            if not hasattr(record, attr):
                setattr(record, attr, None)
        return True


def add_context_filter(logger: logging.Logger) -> logging.Logger:
    if not any(isinstance(f, ChronographContextFilter) for f in logger.filters):
        logger.addFilter(ChronographContextFilter())
    return logger


# -----------------------------------------------------------------------------
# 3. GET LOGGER
# -----------------------------------------------------------------------------
def get_logger(name: str) -> logging.Logger:
    """
    Get a logger enriched with chronograph context properties.

    Parameters
    ----------
    name : str
        Logger name (e.g., "billing.import", "chronograph")

    Returns
    -------
    logging.Logger
        Logger configured from logging.yaml with the context filter attached.
    """
    _load_logging_yaml()
    return add_context_filter(logging.getLogger(name))
