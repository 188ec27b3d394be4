"""
Ambient logging properties for the stdlib sink.

Properties pushed here are visible to every record emitted through a logger
carrying ``ChronographContextFilter`` until the returned scope is exited.
Backed by a ContextVar, so threads and asyncio tasks each see their own set.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

_EMPTY: Mapping[str, Any] = MappingProxyType({})

_properties_var: ContextVar[Mapping[str, Any]] = ContextVar(
    "chronograph_properties", default=_EMPTY
)


class PropertyScope:
    """Handle for a pushed property; exiting or closing it removes the property."""

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value
        updated = dict(_properties_var.get())
        updated[name] = value
        self._token: Optional[Token] = _properties_var.set(MappingProxyType(updated))

    def close(self) -> None:
        if self._token is None:
            return
        token, self._token = self._token, None
        try:
            _properties_var.reset(token)
        except ValueError:
            # released from another context: drop just this name
            remaining = dict(_properties_var.get())
            remaining.pop(self.name, None)
            _properties_var.set(MappingProxyType(remaining))

    def __enter__(self) -> "PropertyScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


def push_property(name: str, value: Any) -> PropertyScope:
    """Push ``name=value`` into the current logging context."""
    return PropertyScope(name, value)


def current_properties() -> Dict[str, Any]:
    """Return a copy of the properties visible in the current context."""
    return dict(_properties_var.get())
