"""
OTLP gRPC exporter factories shared by the log, trace and metric pipelines.
"""

import os
from typing import Dict, Optional

from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

DEFAULT_ENDPOINT: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
DEFAULT_HEADERS: Optional[str] = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")


def parse_headers(raw: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Parse an ``OTEL_EXPORTER_OTLP_HEADERS`` style string (``k1=v1,k2=v2``).

    Entries without ``=`` are ignored.
    """
    if not raw:
        return None
    pairs = [h.split("=", 1) for h in raw.split(",") if "=" in h]
    return {k.strip(): v.strip() for k, v in pairs} or None


def _exporter_kwargs(endpoint: Optional[str] = None) -> Dict[str, object]:
    return {
        "endpoint": endpoint or DEFAULT_ENDPOINT,
        "headers": parse_headers(DEFAULT_HEADERS),
        "insecure": (endpoint or DEFAULT_ENDPOINT).startswith("http://"),
    }


def build_trace_exporter(endpoint: Optional[str] = None) -> OTLPSpanExporter:
    """Create the span exporter used by ``init_tracing``."""
    return OTLPSpanExporter(**_exporter_kwargs(endpoint))


def build_metric_exporter(endpoint: Optional[str] = None) -> OTLPMetricExporter:
    """Create the metric exporter used by ``init_metrics``."""
    return OTLPMetricExporter(**_exporter_kwargs(endpoint))


def build_log_exporter(endpoint: Optional[str] = None) -> OTLPLogExporter:
    """Create the log exporter used by ``init_logging``."""
    return OTLPLogExporter(**_exporter_kwargs(endpoint))
