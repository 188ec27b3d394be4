"""
Helpers for creating chronographs bound to a logger.

The event level of chronographs created here comes from the process-wide
default (see ``chronograph.config.set_default_event_level``).
"""

from __future__ import annotations

from typing import Any, Optional

from chronograph.chronograph import Chronograph
from chronograph.config import get_default_event_level
from chronograph.sinks import as_sink


def chrono(target_logger: Any, action_description: Optional[str] = None) -> Chronograph:
    """
    Create a chronograph writing to ``target_logger``.

    Without ``action_description`` the chronograph is not started, so call
    ``start()`` once it is configured. With a description it is started
    immediately.

    ``target_logger`` may be a stdlib logger, a logger name, a loguru logger
    or any ``LoggerSink``.
    """
    chronograph = Chronograph.create(as_sink(target_logger)).with_event_level(
        get_default_event_level()
    )
    if action_description is None:
        return chronograph
    return chronograph.for_(action_description).start()
