# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability and metrics for the httpapi client.

Classes:
    UnifiedMetricsCollector: Metrics collector supporting dict and Prometheus.

Functions:
    get_metrics_collector: Get the global metrics collector singleton.
    reset_metrics_collector: Reset the global metrics collector singleton.
"""

from .collector import (
    METRIC_DEFINITIONS,
    MetricDefinition,
    UnifiedMetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    CALLS_INTERCEPTED_TOTAL,
    DESCRIPTOR_CACHE_HITS_TOTAL,
    DESCRIPTOR_CACHE_MISSES_TOTAL,
    DISPATCHER_CACHE_HITS_TOTAL,
    DISPATCHER_CACHE_MISSES_TOTAL,
    DISPATCHER_SYNTHESIS_FAILURES_TOTAL,
    DISPATCHER_SYNTHESIS_SECONDS,
    DISPATCHERS_SYNTHESIZED_TOTAL,
    METRIC_PREFIX,
    SYNTHESIS_BUCKETS,
)

__all__ = [
    "CALLS_INTERCEPTED_TOTAL",
    "DESCRIPTOR_CACHE_HITS_TOTAL",
    "DESCRIPTOR_CACHE_MISSES_TOTAL",
    "DISPATCHER_CACHE_HITS_TOTAL",
    "DISPATCHER_CACHE_MISSES_TOTAL",
    "DISPATCHERS_SYNTHESIZED_TOTAL",
    "DISPATCHER_SYNTHESIS_FAILURES_TOTAL",
    "DISPATCHER_SYNTHESIS_SECONDS",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    "SYNTHESIS_BUCKETS",
    "MetricDefinition",
    "UnifiedMetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
