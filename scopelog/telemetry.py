"""OpenTelemetry bridge.

Components instrumented with the OTel logs API can have their records written
by a :class:`~scopelog.logger.Logger`: :class:`ScopeLogRecordExporter` is an
OTel ``LogRecordExporter`` that re-emits every record through the logger, and
:func:`configure_telemetry` wires it into a ``LoggerProvider``.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any, Optional

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    LogRecordExporter,
    LogRecordExportResult,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource

from .fields import LEVEL, TIME, Field
from .logger import Logger
from .scope import Scope

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def timestamp_from_ns(timestamp_ns: int) -> datetime:
    """UTC datetime for a nanosecond epoch timestamp (microsecond precision)."""
    return _EPOCH + timedelta(microseconds=timestamp_ns // 1000)


def record_fields(record: Any) -> tuple[str, tuple[Field, ...]]:
    """
    Map an OTel ``LogRecord`` to a message and call-site fields.

    body becomes the message, severity text the ``level``, the timestamp the
    ``time``, and every attribute a field. Trace and span ids are added as
    ``trace_id``/``span_id`` in hex when present.
    """
    body = record.body
    msg = body if isinstance(body, str) else str(body)

    fields: list[Field] = []
    if record.severity_text:
        fields.append(Field(LEVEL, record.severity_text.lower()))
    if record.timestamp:
        fields.append(Field(TIME, timestamp_from_ns(record.timestamp)))

    trace_id = getattr(record, "trace_id", None)
    span_id = getattr(record, "span_id", None)
    if trace_id:
        fields.append(Field("trace_id", f"{trace_id:032x}"))
    if span_id:
        fields.append(Field("span_id", f"{span_id:016x}"))

    for key, value in (record.attributes or {}).items():
        if isinstance(value, tuple):
            value = list(value)
        fields.append(Field(str(key), value))
    return msg, tuple(fields)


class ScopeLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that writes records through a :class:`Logger`.

    Each record is logged with :meth:`Logger.print` in the exporter's scope,
    so the scope's chain and the logger's base fields apply as for any other
    call. Record attributes take precedence over scope fields.

    Example:
        >>> exporter = ScopeLogRecordExporter(log, scope)
        >>> provider = LoggerProvider()
        >>> provider.add_log_record_processor(SimpleLogRecordProcessor(exporter))
    """

    def __init__(self, logger: Logger, scope: Optional[Scope] = None):
        self._logger = logger
        self._scope = scope
        self._shutdown = False

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """Log every record of ``batch``.

        Returns:
            LogRecordExportResult.SUCCESS on success,
            LogRecordExportResult.FAILURE after shutdown or on error.
        """
        if self._shutdown:
            return LogRecordExportResult.FAILURE
        try:
            for readable_record in batch:
                msg, fields = record_fields(readable_record.log_record)
                self._logger.print(self._scope, msg, *fields)
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        self._shutdown = True

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Records are written synchronously, nothing is buffered."""
        return True


def configure_telemetry(
    logger: Logger,
    scope: Optional[Scope] = None,
    service_name: str = "scopelog",
    service_version: str = "",
    batch_logs: bool = False,
) -> LoggerProvider:
    """
    Create an OTel ``LoggerProvider`` whose records are written by ``logger``.

    Returns the provider for explicit injection into components -- does NOT
    set the global provider.

    Args:
        logger: Logger that writes the records.
        scope: Scope whose fields are added to every record.
        service_name: Service identifier for resource attributes.
        service_version: Service version for resource attributes.
        batch_logs: If True, use BatchLogRecordProcessor. If False, use
            SimpleLogRecordProcessor (immediate, keeps call order).

    Returns:
        Configured LoggerProvider.
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": service_version,
        }
    )

    exporter = ScopeLogRecordExporter(logger, scope)
    logger_provider = LoggerProvider(resource=resource)
    if batch_logs:
        logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    else:
        logger_provider.add_log_record_processor(SimpleLogRecordProcessor(exporter))
    return logger_provider
