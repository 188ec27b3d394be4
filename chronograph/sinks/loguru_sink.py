"""
Sink writing chronograph events to a loguru logger.
"""

from __future__ import annotations

from typing import Any, ContextManager, Dict, Optional

from loguru import logger as default_logger

from chronograph.logging.levels import EventLevel
from chronograph.utils.exceptions import EventLevelError
from chronograph.utils.templates import render_template

_TO_TARGET: Dict[EventLevel, str] = {
    EventLevel.VERBOSE: "TRACE",
    EventLevel.DEBUG: "DEBUG",
    EventLevel.INFORMATION: "INFO",
    EventLevel.WARNING: "WARNING",
    EventLevel.ERROR: "ERROR",
    EventLevel.FATAL: "CRITICAL",
}

_TO_EVENT: Dict[str, EventLevel] = {value: key for key, value in _TO_TARGET.items()}


class LoguruSink:
    """
    Renders message templates and writes them to a loguru ``logger``.

    The template and bound values are attached to ``record["extra"]`` as
    ``message_template`` and ``template_properties``; pushed properties use
    ``logger.contextualize``.
    """

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger if logger is not None else default_logger

    @property
    def logger(self) -> Any:
        return self._logger

    def write(self, level: EventLevel, message_template: str, *property_values: Any) -> None:
        if level is EventLevel.NONE:
            return

        message, template_properties = render_template(message_template, property_values)

        exception: Optional[BaseException] = next(
            (
                v for v in property_values
                if isinstance(v, BaseException) and v.__traceback__ is not None
            ),
            None,
        )

        (
            self._logger
            .opt(exception=exception)
            .bind(message_template=message_template, template_properties=template_properties)
            .log(self.to_target_level(level), message)
        )

    def push_property(self, name: str, value: Any) -> ContextManager[Any]:
        return self._logger.contextualize(**{name: value})

    @staticmethod
    def to_target_level(level: EventLevel) -> str:
        try:
            return _TO_TARGET[EventLevel(level)]
        except (KeyError, ValueError):
            raise EventLevelError(f"Event level {level!r} has no loguru counterpart") from None

    @staticmethod
    def to_event_level(level: str) -> EventLevel:
        try:
            return _TO_EVENT[level.upper()]
        except KeyError:
            raise EventLevelError(f"Loguru level {level!r} has no event level counterpart") from None
