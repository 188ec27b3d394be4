"""
Shared exception hierarchy for chronograph.

Errors are only raised at configuration time. Closing a chronograph never
raises; failures there are reported to the sink instead.
"""

from __future__ import annotations

from typing import Optional

from chronograph.utils.error_codes import ErrorInfo, get_error_info


class ChronographError(Exception):
    """Base exception for all chronograph errors."""

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        self.info: ErrorInfo = get_error_info(code)
        self.code: str = self.info.code
        self.detail: str = message or self.info.description
        super().__init__(f"{self.code}: {self.detail}")


class EventLevelError(ChronographError, ValueError):
    """Event level could not be mapped to or from a logger level."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__("CHR-LVL-0001", message)


class ConfigurationError(ChronographError, ValueError):
    """Chronograph setter received arguments outside of its domain."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__("CHR-CFG-0001", message)


class SinkError(ChronographError, TypeError):
    """Object cannot be used as a logger sink."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__("CHR-SNK-0001", message)
