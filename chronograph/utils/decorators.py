"""
Decorator timing every call of a function with a chronograph.
"""

from __future__ import annotations

import inspect
import functools
from typing import Any, Callable, Optional, TypeVar, Union

from chronograph.chronograph import Threshold
from chronograph.helpers import chrono
from chronograph.logging.levels import EventLevel

F = TypeVar("F", bound=Callable[..., Any])


def timed(
    action_description: str,
    *,
    logger: Any = None,
    level: Optional[Union[str, EventLevel]] = None,
    long_running_threshold: Optional[Threshold] = None,
) -> Callable[[F], F]:
    """
    Decorator that writes start/finish events around each call.

    Usage:
        @timed("Importing invoices", long_running_threshold=5)
        async def import_invoices(...):
            ...

    ``logger`` defaults to the stdlib logger of the decorated function's
    module. Exceptions raised by the function propagate unchanged; the
    finish event is still written.
    """

    def decorator(func: F) -> F:
        target = logger if logger is not None else func.__module__

        def _build():
            chronograph = chrono(target).for_(action_description)
            if level is not None:
                chronograph.with_event_level(level)
            if long_running_threshold is not None:
                chronograph.with_long_running_operation_report(long_running_threshold)
            return chronograph

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _build().start():
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with _build().start():
                return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
