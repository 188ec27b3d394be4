"""Unit tests for the stdlib logging and loguru sinks."""

import logging
import time
from datetime import timedelta

import pytest
from loguru import logger as loguru_logger

from chronograph import (
    OPERATION_DURATION_MILLISECONDS_PARAMETER,
    Chronograph,
    EventLevel,
    EventLevelError,
    LoggingSink,
    LoguruSink,
    SinkError,
    as_sink,
)
from chronograph.logging.context import current_properties

from .conftest import RecordingSink


@pytest.fixture
def stdlib_logger() -> logging.Logger:
    return logging.getLogger("tests.sinks.stdlib")


@pytest.fixture
def loguru_records():
    records = []
    handler_id = loguru_logger.add(lambda message: records.append(message.record), level=0, format="{message}")
    yield records
    loguru_logger.remove(handler_id)


class TestLoggingSink:
    """Tests for LoggingSink."""

    def test_write_renders_template(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(logging.INFO, logger=stdlib_logger.name):
            sink.write(EventLevel.INFORMATION, "Loaded {Count} rows", 42)

        record = caplog.records[-1]
        assert record.getMessage() == "Loaded 42 rows"
        assert record.levelno == logging.INFO
        assert record.message_template == "Loaded {Count} rows"
        assert record.template_properties == {"Count": 42}

    def test_plain_message_with_percent_sign(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(logging.INFO, logger=stdlib_logger.name):
            sink.write(EventLevel.WARNING, "100% done")

        assert caplog.records[-1].getMessage() == "100% done"
        assert caplog.records[-1].levelno == logging.WARNING

    def test_pushed_properties_are_attached_to_records(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(logging.INFO, logger=stdlib_logger.name):
            with sink.push_property("Tenant", "acme"):
                sink.write(EventLevel.INFORMATION, "inside")
            sink.write(EventLevel.INFORMATION, "outside")

        inside, outside = caplog.records[-2:]
        assert inside.properties == {"Tenant": "acme"}
        assert inside.Tenant == "acme"
        assert outside.properties == {}
        assert current_properties() == {}

    def test_reserved_property_names_do_not_overwrite_record_fields(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(logging.INFO, logger=stdlib_logger.name):
            with sink.push_property("name", "shadow"):
                sink.write(EventLevel.INFORMATION, "message")

        record = caplog.records[-1]
        assert record.name == stdlib_logger.name
        assert record.properties == {"name": "shadow"}

    def test_none_level_is_never_written(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(1, logger=stdlib_logger.name):
            sink.write(EventLevel.NONE, "hidden")

        assert not [r for r in caplog.records if r.name == stdlib_logger.name]

    def test_verbose_level_maps_below_debug(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(1, logger=stdlib_logger.name):
            sink.write(EventLevel.VERBOSE, "trace message")

        record = caplog.records[-1]
        assert record.levelno == 5
        assert record.levelname == "VERBOSE"

    def test_disabled_level_is_skipped(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(logging.WARNING, logger=stdlib_logger.name):
            sink.write(EventLevel.DEBUG, "debug message")

        assert not [r for r in caplog.records if r.name == stdlib_logger.name]

    def test_exception_value_is_attached_as_exc_info(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)
        try:
            raise RuntimeError("boom")
        except RuntimeError as ex:
            error = ex

        with caplog.at_level(logging.INFO, logger=stdlib_logger.name):
            sink.write(EventLevel.ERROR, "failed: {Exception}", error)

        record = caplog.records[-1]
        assert record.getMessage() == "failed: boom"
        assert record.exc_info[1] is error

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (EventLevel.VERBOSE, 5),
            (EventLevel.DEBUG, logging.DEBUG),
            (EventLevel.INFORMATION, logging.INFO),
            (EventLevel.WARNING, logging.WARNING),
            (EventLevel.ERROR, logging.ERROR),
            (EventLevel.FATAL, logging.CRITICAL),
        ],
    )
    def test_level_mapping(self, level: EventLevel, expected: int) -> None:
        assert LoggingSink.to_target_level(level) == expected
        assert LoggingSink.to_event_level(expected) is level

    def test_unmapped_levels_raise(self) -> None:
        with pytest.raises(EventLevelError):
            LoggingSink.to_target_level(EventLevel.NONE)
        with pytest.raises(EventLevelError):
            LoggingSink.to_event_level(25)

    def test_chronograph_finish_record_carries_duration(self, stdlib_logger, caplog) -> None:
        sink = LoggingSink(stdlib_logger)

        with caplog.at_level(logging.INFO, logger=stdlib_logger.name):
            Chronograph.create(sink).with_parameter("Tenant", "acme").start("Test operation").close()

        start, finish = [r for r in caplog.records if r.name == stdlib_logger.name]
        assert start.getMessage() == "Started test operation."
        assert finish.getMessage().startswith("Finished test operation. [0:00:00")
        assert finish.properties["Tenant"] == "acme"
        assert isinstance(finish.properties[OPERATION_DURATION_MILLISECONDS_PARAMETER], float)
        assert "Tenant" not in start.properties
        assert current_properties() == {}


class TestLoguruSink:
    """Tests for LoguruSink."""

    def test_write_renders_template(self, loguru_records) -> None:
        sink = LoguruSink()

        sink.write(EventLevel.WARNING, "Loaded {Count} rows", 42)

        record = loguru_records[-1]
        assert record["message"] == "Loaded 42 rows"
        assert record["level"].name == "WARNING"
        assert record["extra"]["message_template"] == "Loaded {Count} rows"
        assert record["extra"]["template_properties"] == {"Count": 42}

    def test_braces_without_values_are_not_formatted(self, loguru_records) -> None:
        LoguruSink().write(EventLevel.INFORMATION, "payload {{ id = 1 }}")

        assert loguru_records[-1]["message"] == "payload { id = 1 }"

    def test_pushed_properties_are_contextualized(self, loguru_records) -> None:
        sink = LoguruSink(loguru_logger)

        with sink.push_property("Tenant", "acme"):
            sink.write(EventLevel.INFORMATION, "inside")
        sink.write(EventLevel.INFORMATION, "outside")

        inside, outside = loguru_records[-2:]
        assert inside["extra"]["Tenant"] == "acme"
        assert "Tenant" not in outside["extra"]

    def test_none_level_is_never_written(self, loguru_records) -> None:
        LoguruSink().write(EventLevel.NONE, "hidden")

        assert loguru_records == []

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (EventLevel.VERBOSE, "TRACE"),
            (EventLevel.DEBUG, "DEBUG"),
            (EventLevel.INFORMATION, "INFO"),
            (EventLevel.WARNING, "WARNING"),
            (EventLevel.ERROR, "ERROR"),
            (EventLevel.FATAL, "CRITICAL"),
        ],
    )
    def test_level_mapping(self, level: EventLevel, expected: str) -> None:
        assert LoguruSink.to_target_level(level) == expected
        assert LoguruSink.to_event_level(expected) is level

    def test_chronograph_with_long_running_report(self, loguru_records) -> None:
        chronograph = (
            Chronograph.create(LoguruSink())
            .with_long_running_operation_report(timedelta(milliseconds=1))
            .with_parameter("Tenant", "acme")
            .start("Test operation")
        )
        time.sleep(0.005)
        chronograph.close()

        messages = [record["message"] for record in loguru_records]
        assert messages[0] == "Started test operation."
        assert messages[1].startswith("Finished test operation.")
        assert "test operation took a long time to finish" in messages[2]
        assert loguru_records[1]["extra"]["Tenant"] == "acme"
        assert loguru_records[1]["extra"]["IsLongRunningOperation"] is True


class TestAsSink:
    """Tests for as_sink."""

    def test_stdlib_logger(self, stdlib_logger) -> None:
        sink = as_sink(stdlib_logger)

        assert isinstance(sink, LoggingSink)
        assert sink.logger is stdlib_logger

    def test_logger_name(self) -> None:
        sink = as_sink("tests.sinks.named")

        assert isinstance(sink, LoggingSink)
        assert sink.logger.name == "tests.sinks.named"

    def test_loguru_logger(self) -> None:
        assert isinstance(as_sink(loguru_logger), LoguruSink)

    def test_existing_sink_is_returned(self) -> None:
        sink = RecordingSink()

        assert as_sink(sink) is sink

    def test_unsupported_target_raises(self) -> None:
        with pytest.raises(SinkError):
            as_sink(42)
