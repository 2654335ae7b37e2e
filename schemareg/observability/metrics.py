"""
Metrics initialization and meter lookup for OpenTelemetry.
"""

from opentelemetry import metrics
from opentelemetry.metrics import Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader

from schemareg.observability.otlp_exporter import build_metric_exporter
from schemareg.observability.resource import SERVICE_NAME_VALUE, build_resource

_initialized: bool = False


def init_metrics() -> None:
    """
    Install a global MeterProvider with an OTLP metric exporter.

    Idempotent; only the first call installs a provider.
    """
    global _initialized

    if _initialized:
        return

    reader = PeriodicExportingMetricReader(build_metric_exporter())
    metrics.set_meter_provider(
        MeterProvider(resource=build_resource(), metric_readers=[reader])
    )
    _initialized = True


def get_meter() -> Meter:
    """
    Return the meter for this library.

    Instruments created before ``init_metrics`` runs are bound to the
    no-op provider and are upgraded once a real provider is installed.
    """
    return metrics.get_meter(SERVICE_NAME_VALUE)
