"""
The logger sink capability a chronograph writes to.

A sink renders and persists events; chronograph only composes them.
"""

from __future__ import annotations

from typing import Any, ContextManager, Protocol, runtime_checkable

from chronograph.logging.levels import EventLevel


@runtime_checkable
class LoggerSink(Protocol):
    """Common interface for all chronograph underlying loggers."""

    def write(self, level: EventLevel, message_template: str, *property_values: Any) -> None:
        """
        Write an event at ``level``.

        With no ``property_values`` the template is a plain message; otherwise
        the sink binds the values to the template placeholders.
        """
        ...

    def push_property(self, name: str, value: Any) -> ContextManager[Any]:
        """
        Push a property to the underlying logger context.

        The property is visible to subsequent writes until the returned
        context manager is exited.
        """
        ...
