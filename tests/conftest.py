"""Shared fixtures for chronograph tests."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

import pytest

import chronograph.config as chronograph_config
import chronograph.logging.logger as chronograph_logger
from chronograph import Chronograph, EventLevel
from chronograph.utils.templates import render_template


@dataclass
class WrittenEvent:
    level: EventLevel
    message: str
    template: str
    values: Tuple[Any, ...]
    properties: Dict[str, Any]


@dataclass
class RecordingSink:
    """Sink keeping every written event and the properties active at write time."""

    events: List[WrittenEvent] = field(default_factory=list)
    pushed: List[str] = field(default_factory=list)
    released: List[str] = field(default_factory=list)
    active: Dict[str, Any] = field(default_factory=dict)

    def write(self, level: EventLevel, message_template: str, *property_values: Any) -> None:
        message, _ = render_template(message_template, property_values)
        self.events.append(
            WrittenEvent(level, message, message_template, property_values, dict(self.active))
        )

    @contextmanager
    def push_property(self, name: str, value: Any) -> Iterator[None]:
        self.pushed.append(name)
        self.active[name] = value
        try:
            yield
        finally:
            self.active.pop(name, None)
            self.released.append(name)

    @property
    def messages(self) -> List[str]:
        return [event.message for event in self.events]

    def containing(self, text: str) -> List[WrittenEvent]:
        return [event for event in self.events if text in event.message]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def chronograph(sink: RecordingSink) -> Chronograph:
    return Chronograph.create(sink)


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # keep logging.yaml from reconfiguring handlers installed by pytest
    monkeypatch.setattr(chronograph_logger, "_LOGGER_INITIALIZED", True)
    previous = chronograph_config.get_default_event_level()
    yield
    chronograph_config.set_default_event_level(previous)
