"""
CHR error code registry for chronograph.

Each code has:
- description
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ErrorInfo:
    code: str
    description: str


# Core registry
_CHR_REGISTRY: Dict[str, ErrorInfo] = {
    # Levels
    "CHR-LVL-0001": ErrorInfo("CHR-LVL-0001", "Unknown event level"),

    # Configuration
    "CHR-CFG-0001": ErrorInfo("CHR-CFG-0001", "Invalid chronograph configuration"),

    # Sinks
    "CHR-SNK-0001": ErrorInfo("CHR-SNK-0001", "Unsupported logger sink target"),
}


def get_error_info(code: str) -> ErrorInfo:
    """Return ErrorInfo for a given CHR code, or a generic one if not registered."""
    return _CHR_REGISTRY.get(
        code,
        ErrorInfo(code=code, description="Unknown chronograph error code"),
    )
