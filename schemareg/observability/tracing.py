"""
OpenTelemetry tracing initialization and tracer helper.
"""

from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Tracer

from schemareg.observability.otlp_exporter import build_trace_exporter
from schemareg.observability.resource import SERVICE_NAME_VALUE, build_resource


def init_tracing() -> None:
    """
    Install a global TracerProvider exporting spans over OTLP.

    Library code only ever calls ``get_tracer``; until this runs, spans are
    non-recording.
    """
    provider = TracerProvider(resource=build_resource())
    provider.add_span_processor(BatchSpanProcessor(build_trace_exporter()))
    trace.set_tracer_provider(provider)


def get_tracer(name: Optional[str] = None) -> Tracer:
    """
    Get a Tracer for the given instrumentation scope.

    Args:
        name: Scope name; defaults to the service name.
    """
    return trace.get_tracer(name or SERVICE_NAME_VALUE)
