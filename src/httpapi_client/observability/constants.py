# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `httpapi_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`

Label Best Practices:
    Use only categorical labels:
    - `interface` - Qualified name of a dispatched interface
    - `member` - Member name on that interface

    NEVER use argument values or request URIs as labels.
"""


METRIC_PREFIX = "httpapi"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Dispatcher Registry Metrics (dispatch/registry.py)
# =============================================================================

DISPATCHERS_SYNTHESIZED_TOTAL = f"{METRIC_PREFIX}_dispatchers_synthesized_total"
"""Total dispatcher classes synthesized."""

DISPATCHER_SYNTHESIS_FAILURES_TOTAL = (
    f"{METRIC_PREFIX}_dispatcher_synthesis_failures_total"
)
"""Total failed dispatcher synthesis attempts."""

DISPATCHER_SYNTHESIS_SECONDS = f"{METRIC_PREFIX}_dispatcher_synthesis_seconds"
"""Time spent collecting descriptors and building a dispatcher class."""

DESCRIPTOR_CACHE_HITS_TOTAL = f"{METRIC_PREFIX}_descriptor_cache_hits_total"
"""Member table lookups answered from the cache."""

DESCRIPTOR_CACHE_MISSES_TOTAL = f"{METRIC_PREFIX}_descriptor_cache_misses_total"
"""Member table lookups that had to collect the interface."""

DISPATCHER_CACHE_HITS_TOTAL = f"{METRIC_PREFIX}_dispatcher_cache_hits_total"
"""Dispatcher factory lookups answered from the cache."""

DISPATCHER_CACHE_MISSES_TOTAL = f"{METRIC_PREFIX}_dispatcher_cache_misses_total"
"""Dispatcher factory lookups that had to synthesize."""


# =============================================================================
# Dispatch Metrics (dispatch/synthesizer.py)
# =============================================================================

CALLS_INTERCEPTED_TOTAL = f"{METRIC_PREFIX}_calls_intercepted_total"
"""Total member calls forwarded to an interceptor."""


SYNTHESIS_BUCKETS = [0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
"""Histogram buckets for dispatcher synthesis time."""


__all__ = [
    "CALLS_INTERCEPTED_TOTAL",
    "DESCRIPTOR_CACHE_HITS_TOTAL",
    "DESCRIPTOR_CACHE_MISSES_TOTAL",
    "DISPATCHER_CACHE_HITS_TOTAL",
    "DISPATCHER_CACHE_MISSES_TOTAL",
    "DISPATCHERS_SYNTHESIZED_TOTAL",
    "DISPATCHER_SYNTHESIS_FAILURES_TOTAL",
    "DISPATCHER_SYNTHESIS_SECONDS",
    "METRIC_PREFIX",
    "SYNTHESIS_BUCKETS",
]
