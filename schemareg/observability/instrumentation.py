"""
Observability bootstrap utilities for logging, tracing, and metrics.

This module provides:
- a unified initialization entrypoint (`init_observability`)
- stable metric instruments for the schema cache
"""

import logging
from typing import Tuple

from opentelemetry.metrics import Counter

from schemareg.observability.logging import init_logging
from schemareg.observability.metrics import get_meter, init_metrics
from schemareg.observability.tracing import init_tracing


def init_observability(level: int = logging.INFO) -> None:
    """
    Initialize logging, tracing, and metrics for the current process.

    Call once at startup from an entrypoint; library code never calls it.

    Args:
        level: Logging verbosity level for the root logger.
    """
    init_logging(level=level)
    init_tracing()
    init_metrics()


def get_cache_instruments() -> Tuple[Counter, Counter, Counter]:
    """
    Create OpenTelemetry instruments for the schema cache.

    Returns:
        A tuple containing:
            hits: Counter for lookups served from memory.
            misses: Counter for lookups that needed a remote schema.
            fetches: Counter for outbound schema fetches actually issued.
    """
    meter = get_meter()

    hits: Counter = meter.create_counter(
        name="schema_cache_hits",
        description="Schema lookups served from the in-memory cache",
        unit="1",
    )

    misses: Counter = meter.create_counter(
        name="schema_cache_misses",
        description="Schema lookups that were not in the in-memory cache",
        unit="1",
    )

    fetches: Counter = meter.create_counter(
        name="schema_registry_fetches",
        description="Outbound schema-by-id fetches issued to the registry",
        unit="1",
    )

    return hits, misses, fetches
