"""
Logger-agnostic event levels chronograph writes at.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from chronograph.utils.exceptions import EventLevelError

_ALIASES = {
    "trace": "Verbose",
    "info": "Information",
    "warn": "Warning",
    "critical": "Fatal",
    "off": "None",
}


class EventLevel(str, Enum):
    """Severity of a chronograph event, ordered from least to most severe."""

    VERBOSE = "Verbose"
    DEBUG = "Debug"
    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"
    FATAL = "Fatal"
    # Never written; only meaningful for sinks that can disable a level.
    NONE = "None"

    @classmethod
    def _missing_(cls, value: object) -> Optional["EventLevel"]:
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        key = _ALIASES.get(key, key).lower()
        for member in cls:
            if member.value.lower() == key or member.name.lower() == key:
                return member
        return None

    @classmethod
    def parse(cls, value: Union[str, "EventLevel"]) -> "EventLevel":
        """Parse a level name case-insensitively ("info", "Warning", "CRITICAL")."""
        try:
            return cls(value)
        except ValueError:
            raise EventLevelError(f"Unknown event level: {value!r}") from None
