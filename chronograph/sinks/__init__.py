"""
Re-export sink classes for easier imports.

Usage:
    from chronograph.sinks import LoggingSink, LoguruSink, as_sink
"""

from __future__ import annotations

import logging
from typing import Any

from chronograph.logging.logger import get_logger
from chronograph.sinks.base import LoggerSink
from chronograph.sinks.logging_sink import LoggingSink
from chronograph.sinks.loguru_sink import LoguruSink
from chronograph.utils.exceptions import SinkError


def _is_loguru_logger(target: Any) -> bool:
    return type(target).__module__.split(".")[0] == "loguru"


def as_sink(target: Any) -> LoggerSink:
    """
    Return a sink for ``target``.

    Accepts an existing sink, a stdlib logger or adapter, a logger name, or a
    loguru logger.
    """
    if isinstance(target, (logging.Logger, logging.LoggerAdapter)):
        return LoggingSink(target)
    if isinstance(target, str):
        return LoggingSink(get_logger(target))
    if _is_loguru_logger(target):
        return LoguruSink(target)
    if isinstance(target, LoggerSink):
        return target
    raise SinkError(f"Cannot write chronograph events to {type(target).__name__}")


__all__ = ["LoggerSink", "LoggingSink", "LoguruSink", "as_sink"]
