"""
Structured JSON logging with an OpenTelemetry log pipeline.

Every line written to stdout is a single JSON object carrying the active
trace/span ids, so registry calls made inside a span can be correlated with
the spans exported by ``tracing``.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor

from schemareg.observability.otlp_exporter import build_log_exporter
from schemareg.observability.resource import SERVICE_NAME_VALUE, build_resource

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


class JsonTraceFormatter(logging.Formatter):
    """
    JSON formatter including trace_id and span_id.

    Emits:
        - level, logger, message, time
        - trace_id / span_id (hex) when a valid span is active
        - service
        - JSON-serializable fields passed via ``extra=``
    """

    def format(self, record: logging.LogRecord) -> str:
        span_ctx = trace.get_current_span().get_span_context()

        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "trace_id": f"{span_ctx.trace_id:032x}" if span_ctx.is_valid else None,
            "span_id": f"{span_ctx.span_id:016x}" if span_ctx.is_valid else None,
            "service": SERVICE_NAME_VALUE,
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            try:
                json.dumps({key: value})
            except (TypeError, ValueError):
                value = repr(value)
            payload[key] = value

        return json.dumps(payload, separators=(",", ":"))


def init_logging(level: int = logging.INFO, export: bool = True) -> None:
    """
    Configure the root logger for the current process.

    Args:
        level: Minimum log level for the root logger.
        export: Also ship records through the OTLP log exporter.
    """
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(JsonTraceFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stdout_handler)
    root.setLevel(level)

    if not export:
        return

    logger_provider = LoggerProvider(resource=build_resource())
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(build_log_exporter())
    )
    root.addHandler(LoggingHandler(level=level, logger_provider=logger_provider))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Canonical way for application code to obtain a logger."""
    return logging.getLogger(name)
