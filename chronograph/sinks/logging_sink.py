"""
Sink writing chronograph events to a stdlib ``logging`` logger.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from chronograph.logging.context import PropertyScope, push_property
from chronograph.logging.levels import EventLevel
from chronograph.logging.logger import VERBOSE, add_context_filter
from chronograph.utils.exceptions import EventLevelError
from chronograph.utils.templates import render_template

_TO_TARGET: Dict[EventLevel, int] = {
    EventLevel.VERBOSE: VERBOSE,
    EventLevel.DEBUG: logging.DEBUG,
    EventLevel.INFORMATION: logging.INFO,
    EventLevel.WARNING: logging.WARNING,
    EventLevel.ERROR: logging.ERROR,
    EventLevel.FATAL: logging.CRITICAL,
}

_TO_EVENT: Dict[int, EventLevel] = {value: key for key, value in _TO_TARGET.items()}


class LoggingSink:
    """
    Renders message templates and writes them to ``logger``.

    The unrendered template and the bound placeholder values travel with the
    record as ``message_template`` and ``template_properties``; properties
    pushed with ``push_property`` are attached by ``ChronographContextFilter``.
    """

    def __init__(self, logger: Union[logging.Logger, logging.LoggerAdapter]) -> None:
        self._logger = logger
        target = logger.logger if isinstance(logger, logging.LoggerAdapter) else logger
        add_context_filter(target)

    @property
    def logger(self) -> Union[logging.Logger, logging.LoggerAdapter]:
        return self._logger

    def write(self, level: EventLevel, message_template: str, *property_values: Any) -> None:
        if level is EventLevel.NONE:
            return

        target_level = self.to_target_level(level)
        if not self._logger.isEnabledFor(target_level):
            return

        message, template_properties = render_template(message_template, property_values)

        exc_info: Optional[BaseException] = next(
            (v for v in property_values if isinstance(v, BaseException)), None
        )

        self._logger.log(
            target_level,
            message,
            exc_info=exc_info,
            extra={
                "message_template": message_template,
                "template_properties": template_properties,
            },
        )

    def push_property(self, name: str, value: Any) -> PropertyScope:
        return push_property(name, value)

    @staticmethod
    def to_target_level(level: EventLevel) -> int:
        try:
            return _TO_TARGET[EventLevel(level)]
        except (KeyError, ValueError):
            raise EventLevelError(f"Event level {level!r} has no logging counterpart") from None

    @staticmethod
    def to_event_level(level: int) -> EventLevel:
        try:
            return _TO_EVENT[level]
        except KeyError:
            raise EventLevelError(f"Logging level {level!r} has no event level counterpart") from None
