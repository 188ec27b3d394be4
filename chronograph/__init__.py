"""
Re-export the public chronograph API for easier imports.

Usage:
    from chronograph import chrono, EventLevel

    with chrono(logger, "Loading catalog"):
        load_catalog()
"""

from .chronograph import (
    IS_LONG_RUNNING_OPERATION_PARAMETER,
    OPERATION_DURATION_MILLISECONDS_PARAMETER,
    PROVIDER_FAILED,
    Chronograph,
)
from .config import get_default_event_level, set_default_event_level, settings
from .helpers import chrono
from .logging.levels import EventLevel
from .sinks import LoggerSink, LoggingSink, LoguruSink, as_sink
from .utils.decorators import timed
from .utils.exceptions import ChronographError, ConfigurationError, EventLevelError, SinkError
from .utils.strings import escape_curly_braces, lowercase_first_char
from .utils.timing import Stopwatch, format_duration

__all__ = [
    "Chronograph",
    "ChronographError",
    "ConfigurationError",
    "EventLevel",
    "EventLevelError",
    "IS_LONG_RUNNING_OPERATION_PARAMETER",
    "LoggerSink",
    "LoggingSink",
    "LoguruSink",
    "OPERATION_DURATION_MILLISECONDS_PARAMETER",
    "PROVIDER_FAILED",
    "SinkError",
    "Stopwatch",
    "as_sink",
    "chrono",
    "escape_curly_braces",
    "format_duration",
    "get_default_event_level",
    "lowercase_first_char",
    "set_default_event_level",
    "settings",
    "timed",
]
