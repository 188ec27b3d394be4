"""
Chronograph: scoped operation timer writing start/finish events to a sink.

Usage:

    with chrono(logger).for_("importing {File}", path).report(
        "imported {RowCount} rows", lambda: len(rows)
    ).start():
        rows = import_rows(path)

produces

    Started importing data.csv.
    Finished importing data.csv. imported 1567 rows. [0:00:01.2345]

Providers passed to ``report`` and ``with_long_running_operation_report`` are
called when the chronograph closes, so they observe values assigned inside
the timed block.
"""

from __future__ import annotations

import logging
import random
import time
from contextlib import ExitStack
from datetime import timedelta
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from chronograph.logging.levels import EventLevel
from chronograph.sinks.base import LoggerSink
from chronograph.utils.exceptions import ConfigurationError
from chronograph.utils.strings import escape_curly_braces, lowercase_first_char
from chronograph.utils.timing import Stopwatch, format_duration

logger = logging.getLogger(__name__)

# Named parameter carrying the operation run time in milliseconds.
OPERATION_DURATION_MILLISECONDS_PARAMETER = "OperationDurationMilliseconds"

# Named parameter set to True when the operation exceeded its threshold.
IS_LONG_RUNNING_OPERATION_PARAMETER = "IsLongRunningOperation"

# Substituted for the result of a provider that raised.
PROVIDER_FAILED = -(2 ** 31)

ValueProvider = Callable[[], Any]
OnStartAction = Callable[[Sequence[Any]], None]
OnEndAction = Callable[[Stopwatch, Sequence[Any]], None]
Threshold = Union[timedelta, int, float]


def _as_timedelta(threshold: Threshold) -> timedelta:
    if isinstance(threshold, timedelta):
        return threshold
    return timedelta(seconds=threshold)


class Chronograph:
    """
    Times an operation and reports it to a logger sink.

    Configure with the chained ``with_*`` / ``for_`` / ``report`` methods
    (each mutates and returns the same instance), then ``start()``; ``close()``
    or leaving a ``with`` block writes the finish event. A chronograph is
    meant to be used from a single thread.
    """

    def __init__(
        self,
        sink: LoggerSink,
        event_level: Union[str, EventLevel] = EventLevel.INFORMATION,
    ) -> None:
        self._sink = sink
        self._stopwatch = Stopwatch()
        self._event_level = EventLevel.parse(event_level)

        self._action_description = ""
        self._action_description_parameters: List[Any] = []
        self._parameters: Dict[str, Any] = {}

        self._end_message_template: Optional[str] = None
        self._count_providers: Tuple[ValueProvider, ...] = ()

        self._long_running_operation_threshold: Optional[timedelta] = None
        self._long_running_operation_report_message: Optional[str] = None
        self._long_running_operation_report_parameters: Optional[Tuple[Any, ...]] = None
        self._long_running_operation_report_parameter_providers: Optional[
            Tuple[ValueProvider, ...]
        ] = None

        self._on_start_action: Optional[OnStartAction] = None
        self._on_end_action: Optional[OnEndAction] = None

        # seeded per instance so chronographs created together sample independently
        self._random = random.Random(time.time_ns() ^ id(self))
        self._should_write_messages = True
        self._should_always_report_long_running_operations = True

        self._was_ever_started = False
        self._closed = False

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, sink: LoggerSink) -> "Chronograph":
        """Create an empty, not started chronograph for fluent configuration."""
        return cls(sink)

    @classmethod
    def started(
        cls,
        sink: LoggerSink,
        action_description: str,
        event_level: Union[str, EventLevel] = EventLevel.INFORMATION,
        *parameters: Any,
    ) -> "Chronograph":
        """Create a chronograph and start it immediately, writing the start event."""
        return cls(sink, event_level).for_(action_description, *parameters).start()

    @classmethod
    def started_with_report(
        cls,
        sink: LoggerSink,
        action_description: str,
        event_level: Union[str, EventLevel] = EventLevel.INFORMATION,
        end_message_template: Optional[str] = None,
        *count_providers: ValueProvider,
    ) -> "Chronograph":
        """Like ``started``, with the finish message configured up front."""
        return (
            cls(sink, event_level)
            .for_(action_description)
            .report(end_message_template, *count_providers)
            .start()
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def elapsed(self) -> timedelta:
        return self._stopwatch.elapsed

    @property
    def elapsed_milliseconds(self) -> int:
        return int(self._stopwatch.elapsed_ms)

    @property
    def is_running(self) -> bool:
        return self._stopwatch.is_running

    @property
    def event_level(self) -> EventLevel:
        return self._event_level

    @property
    def action_description(self) -> str:
        return self._action_description

    @property
    def long_running_operation_threshold(self) -> Optional[timedelta]:
        """Exclusive threshold for long-running reports; None when disabled."""
        return self._long_running_operation_threshold

    @property
    def should_write_messages(self) -> bool:
        return self._should_write_messages

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def with_event_level(self, level: Union[str, EventLevel]) -> "Chronograph":
        self._event_level = EventLevel.parse(level)
        return self

    def with_parameter(self, name: str, value: Any) -> "Chronograph":
        """Add a named property pushed to the logging context on close."""
        self._parameters[name] = value
        return self

    def with_parameters(
        self,
        parameters: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]],
    ) -> "Chronograph":
        items = parameters.items() if isinstance(parameters, Mapping) else parameters
        for name, value in items:
            self._parameters[name] = value
        return self

    def for_(self, action_description_template: str, *parameters: Any) -> "Chronograph":
        """
        Set the action description used in the start and finish events.

        ``parameters`` bind positionally to the placeholders of the template
        and accumulate across calls; the description itself is replaced.
        """
        self._action_description = lowercase_first_char(action_description_template)
        self._action_description_parameters.extend(parameters)
        return self

    def report(self, end_message_template: Optional[str], *count_providers: ValueProvider) -> "Chronograph":
        """
        Set the message appended to the finish event.

        ``count_providers`` are called on close and their non-None results
        bind to the placeholders of ``end_message_template``.
        """
        self._end_message_template = end_message_template
        self._count_providers = tuple(count_providers)
        return self

    def with_long_running_operation_report(
        self,
        threshold: Threshold,
        message: Optional[str] = None,
        *,
        parameters: Optional[Sequence[Any]] = None,
        parameter_providers: Optional[Sequence[ValueProvider]] = None,
    ) -> "Chronograph":
        """
        Report operations running longer than ``threshold`` with an extra event.

        ``threshold`` is a timedelta or a number of seconds. The report uses
        ``message`` or a default text. Its values are ``parameters`` if set,
        else the results of ``parameter_providers`` if set, else the finish
        event values.
        """
        if parameters is not None and parameter_providers is not None:
            raise ConfigurationError(
                "Pass either parameters or parameter_providers for the long-running report, not both"
            )

        self._long_running_operation_threshold = _as_timedelta(threshold)
        self._long_running_operation_report_message = message

        if parameters is not None:
            self._long_running_operation_report_parameters = tuple(parameters)
        if parameter_providers is not None:
            self._long_running_operation_report_parameter_providers = tuple(parameter_providers)

        return self

    def with_on_start_action(self, on_start_action: OnStartAction) -> "Chronograph":
        """Called on start, before the start event, with the description parameters."""
        self._on_start_action = on_start_action
        return self

    def with_on_end_action(self, on_end_action: OnEndAction) -> "Chronograph":
        """Called on close, before the finish event, with the stopwatch and finish values."""
        self._on_end_action = on_end_action
        return self

    def with_sampling(
        self,
        sampling_factor: int,
        should_always_report_long_running_operations: bool = True,
    ) -> "Chronograph":
        """
        Write start and finish events for roughly ``sampling_factor`` percent
        of chronographs.

        0 disables writes, 100 or more writes every event. The decision is
        drawn once, here. Long-running reports ignore sampling unless
        ``should_always_report_long_running_operations`` is False.
        """
        if sampling_factor < 0:
            raise ConfigurationError(f"Sampling factor must not be negative, got {sampling_factor}")

        if sampling_factor == 0:
            self._should_write_messages = False
        elif sampling_factor >= 100:
            self._should_write_messages = True
        else:
            self._should_write_messages = self._random.randint(1, 100) <= sampling_factor

        self._should_always_report_long_running_operations = should_always_report_long_running_operations
        return self

    # ------------------------------------------------------------------
    # Running state
    # ------------------------------------------------------------------

    def start(self, action_description_template: Optional[str] = None, *parameters: Any) -> "Chronograph":
        if action_description_template is not None:
            self.for_(action_description_template, *parameters)

        self._was_ever_started = True

        if self._on_start_action is not None:
            self._on_start_action(tuple(self._action_description_parameters))

        if self._should_write_messages:
            if self._action_description_parameters:
                self._sink.write(
                    self._event_level,
                    f"Started {self._action_description}.",
                    *self._action_description_parameters,
                )
            else:
                self._sink.write(self._event_level, f"Started {self._action_description}.")

        self._stopwatch.start()
        return self

    def pause(self) -> None:
        self._stopwatch.stop()

    def resume(self) -> None:
        self._stopwatch.start()

    # ------------------------------------------------------------------
    # Closing
    # ------------------------------------------------------------------

    def close(self, end_message_template: Optional[str] = None, *count_providers: ValueProvider) -> None:
        """
        Stop timing and write the finish event (and the long-running report).

        Passing ``end_message_template`` or ``count_providers`` overrides the
        ones configured by ``report``. Never raises; failures are written to
        the sink as an Error event. Only the first call has an effect.
        """
        if self._closed:
            logger.debug("Chronograph for operation %r is already closed", self._action_description)
            return

        self._closed = True

        if end_message_template is not None or count_providers:
            try:
                self._warn_on_end_message_override(end_message_template, count_providers)
            except Exception as ex:
                self._report_failure(ex)
            self._end_message_template = end_message_template
            self._count_providers = tuple(count_providers)

        self._finish()

    def __enter__(self) -> "Chronograph":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _warn_on_end_message_override(
        self,
        end_message_template: Optional[str],
        count_providers: Tuple[ValueProvider, ...],
    ) -> None:
        if not self._should_write_messages:
            return

        if self._end_message_template is not None:
            self._sink.write(
                EventLevel.WARNING,
                "Looks like the end message template for operation '{Operation}' was previously "
                "configured to '{PreviousTemplate}', it will be overridden by specified "
                "'{EndMessageTemplate}' message",
                self._action_description,
                self._end_message_template,
                end_message_template,
            )

        if self._count_providers:
            self._sink.write(
                EventLevel.WARNING,
                "Looks like the {PreviousCount} parameter provider functions for end message "
                "template were previously configured, they will be overridden by specified "
                "{Count} functions",
                len(self._count_providers),
                len(count_providers),
            )

    def _finish(self) -> None:
        try:
            self._stopwatch.stop()

            if not self._was_ever_started:
                self._sink.write(
                    EventLevel.WARNING,
                    "Looks like chronograph for operation '{Operation}' was not properly started. "
                    "Reported results may be incorrect",
                    self._action_description,
                )

            description = escape_curly_braces(self._action_description)
            elapsed = self._stopwatch.elapsed

            self.with_parameter(OPERATION_DURATION_MILLISECONDS_PARAMETER, elapsed / timedelta(milliseconds=1))

            threshold = self._long_running_operation_threshold
            is_long_running = threshold is not None and elapsed > threshold
            if is_long_running:
                self.with_parameter(IS_LONG_RUNNING_OPERATION_PARAMETER, True)

            with ExitStack() as scopes:
                for name, value in self._parameters.items():
                    scopes.enter_context(self._sink.push_property(name, value))

                finish_parameters = list(self._action_description_parameters)
                if self._count_providers:
                    finish_parameters.extend(self._invoke_providers(self._count_providers))
                finish_parameters.append(format_duration(elapsed))
                finish_parameters = tuple(finish_parameters)

                if self._on_end_action is not None:
                    self._on_end_action(self._stopwatch, finish_parameters)

                if self._should_write_messages:
                    self._sink.write(
                        self._event_level,
                        self._finish_template(description),
                        *finish_parameters,
                    )

                if is_long_running and (
                    self._should_always_report_long_running_operations or self._should_write_messages
                ):
                    self._sink.write(
                        self._event_level,
                        self._long_running_template(description, elapsed),
                        *self._long_running_parameters(finish_parameters),
                    )
        except Exception as ex:
            self._report_failure(ex)

    def _finish_template(self, description: str) -> str:
        if not self._end_message_template or self._end_message_template.isspace():
            return f"Finished {description}. [{{operationDuration}}]"
        end_template = escape_curly_braces(self._end_message_template)
        return f"Finished {description}. {end_template}. [{{operationDuration}}]"

    def _long_running_template(self, description: str, elapsed: timedelta) -> str:
        if self._long_running_operation_report_message:
            return self._long_running_operation_report_message
        return (
            f"{description} took a long time to finish "
            f">({format_duration(self._long_running_operation_threshold)}) : "
            f"[{format_duration(elapsed)}]"
        )

    def _long_running_parameters(self, finish_parameters: Tuple[Any, ...]) -> Sequence[Any]:
        if self._long_running_operation_report_parameters:
            return self._long_running_operation_report_parameters
        if self._long_running_operation_report_parameter_providers:
            return self._invoke_providers(self._long_running_operation_report_parameter_providers)
        return finish_parameters

    def _invoke_providers(self, providers: Sequence[ValueProvider]) -> List[Any]:
        results = []
        for provider in providers:
            value = self._try_invoke_provider(provider)
            if value is not None:
                results.append(value)
        return results

    def _try_invoke_provider(self, provider: Optional[ValueProvider]) -> Any:
        if provider is None:
            return None
        try:
            return provider()
        except Exception as ex:
            self._sink.write(
                EventLevel.ERROR,
                "Error happened during the '{Operation}' count provider invocation. Exception: {Exception}",
                self._action_description,
                ex,
            )
            return PROVIDER_FAILED

    def _report_failure(self, ex: Exception) -> None:
        try:
            self._sink.write(
                EventLevel.ERROR,
                "An exception happened during chronograph disposal. Details: {Exception}",
                ex,
            )
        except Exception:
            logger.exception(
                "Failed to report chronograph failure for operation %r", self._action_description
            )
