"""Tests for the OpenTelemetry bridge.

- ScopeLogRecordExporter re-emits OTel records through a Logger
- configure_telemetry() wires the exporter into a LoggerProvider
"""

import time
from datetime import UTC, datetime

from opentelemetry._logs import LogRecord, SeverityNumber
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import LogRecordExportResult

from conftest import read_records
from scopelog.telemetry import (
    ScopeLogRecordExporter,
    configure_telemetry,
    record_fields,
    timestamp_from_ns,
)


class MockReadableLogRecord:
    def __init__(self, log_record):
        self.log_record = log_record


def make_record(**kwargs):
    defaults = dict(
        timestamp=946684800 * 10**9,
        body="Test message",
        severity_text="INFO",
        severity_number=SeverityNumber.INFO,
        attributes={"log.source": "TestSource"},
    )
    defaults.update(kwargs)
    return LogRecord(**defaults)


def test_timestamp_from_ns():
    assert timestamp_from_ns(946684800 * 10**9 + 1_500_000) == datetime(2000, 1, 1, 0, 0, 0, 1500, tzinfo=UTC)


class TestScopeLogRecordExporter:
    def test_export_writes_record(self, log, sink, scope):
        scope = log.with_field(scope, "request_id", "r-1")
        exporter = ScopeLogRecordExporter(log, scope)

        result = exporter.export([MockReadableLogRecord(make_record())])

        assert result == LogRecordExportResult.SUCCESS
        (record,) = read_records(sink)
        assert record == {
            "msg": "Test message",
            "level": "info",
            "time": "2000-01-01T00:00:00Z",
            "log.source": "TestSource",
            "request_id": "r-1",
        }

    def test_attributes_override_scope(self, log, sink, scope):
        exporter = ScopeLogRecordExporter(log, log.with_field(scope, "log.source", "scope"))
        exporter.export([MockReadableLogRecord(make_record())])
        assert read_records(sink)[0]["log.source"] == "TestSource"

    def test_empty_batch(self, log, sink):
        assert ScopeLogRecordExporter(log).export([]) == LogRecordExportResult.SUCCESS
        assert sink.getvalue() == b""

    def test_after_shutdown(self, log, sink):
        exporter = ScopeLogRecordExporter(log)
        exporter.shutdown()
        result = exporter.export([MockReadableLogRecord(make_record())])
        assert result == LogRecordExportResult.FAILURE
        assert sink.getvalue() == b""

    def test_force_flush_returns_true(self, log):
        assert ScopeLogRecordExporter(log).force_flush() is True


def test_record_fields_non_string_body():
    msg, fields = record_fields(make_record(body={"k": 1}, attributes=None, severity_text=None))
    assert msg == "{'k': 1}"
    assert [f.key for f in fields] == ["time"]


class TestConfigureTelemetry:
    def test_returns_provider(self, log):
        assert isinstance(configure_telemetry(log, service_name="test-app"), LoggerProvider)

    def test_end_to_end(self, log, sink, scope):
        provider = configure_telemetry(log, log.with_field(scope, "svc", "integration"))
        otel_logger = provider.get_logger("integration.test")

        otel_logger.emit(
            LogRecord(
                timestamp=time.time_ns(),
                body="Integration test message",
                severity_text="WARN",
                severity_number=SeverityNumber.WARN,
                attributes={"key": "value"},
            )
        )

        (record,) = read_records(sink)
        assert record["msg"] == "Integration test message"
        assert record["level"] == "warn"
        assert record["key"] == "value"
        assert record["svc"] == "integration"
