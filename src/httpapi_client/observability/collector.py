# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Unified metrics collector supporting both dict-based and Prometheus metrics.

The collector keeps every counter and histogram in a thread-safe dict
store for JSON export and mirrors it into Prometheus metrics registered on
demand from METRIC_DEFINITIONS.

Usage:
    >>> from httpapi_client.observability.collector import get_metrics_collector
    >>> collector = get_metrics_collector()
    >>> collector.inc_counter('httpapi_calls_intercepted_total',
    ...                       labels={'interface': 'UserApi', 'member': 'get'})
    >>> metrics = collector.get_metrics()

Thread Safety:
    All operations are thread-safe. Uses RLock for reentrant locking.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, ClassVar

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from .constants import (
    CALLS_INTERCEPTED_TOTAL,
    DESCRIPTOR_CACHE_HITS_TOTAL,
    DESCRIPTOR_CACHE_MISSES_TOTAL,
    DISPATCHER_CACHE_HITS_TOTAL,
    DISPATCHER_CACHE_MISSES_TOTAL,
    DISPATCHER_SYNTHESIS_FAILURES_TOTAL,
    DISPATCHER_SYNTHESIS_SECONDS,
    DISPATCHERS_SYNTHESIZED_TOTAL,
    SYNTHESIS_BUCKETS,
)

logger = logging.getLogger(__name__)


@dataclass
class MetricDefinition:
    """Schema of a metric: type, description, labels and histogram buckets."""

    name: str
    metric_type: str  # 'counter', 'histogram'
    description: str
    label_names: tuple[str, ...] = ()
    buckets: list[float] | None = None


METRIC_DEFINITIONS: dict[str, MetricDefinition] = {
    DISPATCHERS_SYNTHESIZED_TOTAL: MetricDefinition(
        DISPATCHERS_SYNTHESIZED_TOTAL,
        "counter",
        "Total dispatcher classes synthesized",
        ("interface",),
    ),
    DISPATCHER_SYNTHESIS_FAILURES_TOTAL: MetricDefinition(
        DISPATCHER_SYNTHESIS_FAILURES_TOTAL,
        "counter",
        "Total failed dispatcher synthesis attempts",
        ("interface",),
    ),
    DISPATCHER_SYNTHESIS_SECONDS: MetricDefinition(
        DISPATCHER_SYNTHESIS_SECONDS,
        "histogram",
        "Dispatcher synthesis time",
        ("interface",),
        buckets=SYNTHESIS_BUCKETS,
    ),
    DESCRIPTOR_CACHE_HITS_TOTAL: MetricDefinition(
        DESCRIPTOR_CACHE_HITS_TOTAL,
        "counter",
        "Member table lookups answered from the cache",
        (),
    ),
    DESCRIPTOR_CACHE_MISSES_TOTAL: MetricDefinition(
        DESCRIPTOR_CACHE_MISSES_TOTAL,
        "counter",
        "Member table lookups that collected the interface",
        (),
    ),
    DISPATCHER_CACHE_HITS_TOTAL: MetricDefinition(
        DISPATCHER_CACHE_HITS_TOTAL,
        "counter",
        "Dispatcher factory lookups answered from the cache",
        (),
    ),
    DISPATCHER_CACHE_MISSES_TOTAL: MetricDefinition(
        DISPATCHER_CACHE_MISSES_TOTAL,
        "counter",
        "Dispatcher factory lookups that synthesized a dispatcher",
        (),
    ),
    CALLS_INTERCEPTED_TOTAL: MetricDefinition(
        CALLS_INTERCEPTED_TOTAL,
        "counter",
        "Total member calls forwarded to an interceptor",
        ("interface", "member"),
    ),
}


class UnifiedMetricsCollector:
    """
    Thread-safe metrics collector with a dict store and Prometheus mirror.

    Cardinality Protection:
        At most MAX_LABEL_COMBINATIONS unique label combinations are tracked
        per metric; further combinations are dropped with a warning.

    Example:
        >>> collector = UnifiedMetricsCollector(registry=CollectorRegistry())
        >>> collector.inc_counter('httpapi_dispatchers_synthesized_total',
        ...                       labels={'interface': 'UserApi'})
        >>> collector.get_counter('httpapi_dispatchers_synthesized_total',
        ...                       labels={'interface': 'UserApi'})
        1
    """

    MAX_LABEL_COMBINATIONS: ClassVar[int] = 1000

    def __init__(
        self,
        enable_prometheus: bool = True,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """
        Initialize the metrics collector.

        Args:
            enable_prometheus: Whether to mirror metrics into Prometheus
            registry: Optional Prometheus CollectorRegistry for testing
        """
        self._enable_prometheus = enable_prometheus
        self._registry = registry if registry is not None else REGISTRY

        self._counters: dict[str, dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._histograms: dict[str, dict[str, list[float]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._lock = threading.RLock()

        self._prom_counters: dict[str, Any] = {}
        self._prom_histograms: dict[str, Any] = {}
        self._label_combinations: dict[str, set[str]] = defaultdict(set)

        logger.debug(
            f"UnifiedMetricsCollector initialized "
            f"(prometheus={'enabled' if self._enable_prometheus else 'disabled'})"
        )

    def _labels_to_key(self, labels: dict[str, str] | None) -> str:
        """Convert labels dict to a stable string key."""
        if not labels:
            return ""
        return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))

    def _check_cardinality(self, name: str, label_key: str) -> bool:
        if label_key in self._label_combinations[name]:
            return True
        if len(self._label_combinations[name]) >= self.MAX_LABEL_COMBINATIONS:
            logger.warning(
                f"Cardinality limit ({self.MAX_LABEL_COMBINATIONS}) reached "
                f"for metric {name}. Dropping label combination: {label_key}"
            )
            return False
        self._label_combinations[name].add(label_key)
        return True

    def _get_or_create_prom_counter(self, name: str) -> Any | None:
        if not self._enable_prometheus:
            return None

        with self._lock:
            if name not in self._prom_counters:
                defn = METRIC_DEFINITIONS.get(name)
                description = defn.description if defn else f"Dynamic counter: {name}"
                label_names = defn.label_names if defn else ()
                try:
                    self._prom_counters[name] = Counter(
                        name,
                        description,
                        list(label_names),
                        registry=self._registry,
                    )
                except ValueError as e:
                    # Duplicate registration on a shared registry
                    logger.warning(f"Failed to create Prometheus counter {name}: {e}")
                    self._prom_counters[name] = None
            return self._prom_counters[name]

    def _get_or_create_prom_histogram(self, name: str) -> Any | None:
        if not self._enable_prometheus:
            return None

        with self._lock:
            if name not in self._prom_histograms:
                defn = METRIC_DEFINITIONS.get(name)
                buckets = defn.buckets if defn and defn.buckets else SYNTHESIS_BUCKETS
                label_names = defn.label_names if defn else ()
                description = defn.description if defn else f"Dynamic histogram: {name}"
                try:
                    self._prom_histograms[name] = Histogram(
                        name,
                        description,
                        list(label_names),
                        buckets=buckets,
                        registry=self._registry,
                    )
                except ValueError as e:
                    logger.warning(f"Failed to create Prometheus histogram {name}: {e}")
                    self._prom_histograms[name] = None
            return self._prom_histograms[name]

    # === Counter Operations ===

    def inc_counter(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        Raises:
            ValueError: If value is negative
        """
        if value < 0:
            raise ValueError("Counter increment must be non-negative")

        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._counters[name][label_key] += value

        prom_counter = self._get_or_create_prom_counter(name)
        if prom_counter is not None:
            if labels:
                prom_counter.labels(**labels).inc(value)
            else:
                prom_counter.inc(value)

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        """Current value of a counter, 0 when never incremented."""
        with self._lock:
            return self._counters.get(name, {}).get(self._labels_to_key(labels), 0)

    # === Histogram Operations ===

    def observe_histogram(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Record an observation in a histogram."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._histograms[name][label_key].append(value)
            # Keep only recent observations
            if len(self._histograms[name][label_key]) > 10000:
                self._histograms[name][label_key] = self._histograms[name][label_key][
                    -5000:
                ]

        prom_histogram = self._get_or_create_prom_histogram(name)
        if prom_histogram is not None:
            if labels:
                prom_histogram.labels(**labels).observe(value)
            else:
                prom_histogram.observe(value)

    # === Snapshot Operations ===

    def get_metrics(self) -> dict[str, Any]:
        """
        Get a snapshot of all metrics.

        Returns a dict suitable for JSON serialization with structure:
        {
            "counters": {"metric_name": {"label_key": value, ...}, ...},
            "histograms": {"metric_name": {"label_key": {...}, ...}, ...}
        }
        """
        with self._lock:
            counters = {
                name: dict(label_values)
                for name, label_values in self._counters.items()
            }

            histograms: dict[str, dict[str, dict[str, Any]]] = {}
            for name, label_values in self._histograms.items():
                histograms[name] = {}
                for label_key, observations in label_values.items():
                    if observations:
                        histograms[name][label_key] = {
                            "count": len(observations),
                            "sum": sum(observations),
                            "avg": sum(observations) / len(observations),
                            "min": min(observations),
                            "max": max(observations),
                        }

        return {
            "counters": counters,
            "histograms": histograms,
        }

    def reset(self) -> None:
        """Reset all dict-based metrics to zero."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()
            self._label_combinations.clear()

        logger.debug("Metrics collector reset")

    @property
    def prometheus_enabled(self) -> bool:
        return self._enable_prometheus


# =============================================================================
# Singleton Pattern
# =============================================================================

_global_collector: UnifiedMetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics_collector(
    enable_prometheus: bool = True,
) -> UnifiedMetricsCollector:
    """
    Get or create the global metrics collector singleton.

    Args:
        enable_prometheus: Whether to enable Prometheus metrics
            (only used on first call)
    """
    global _global_collector

    if _global_collector is None:
        with _collector_lock:
            if _global_collector is None:
                _global_collector = UnifiedMetricsCollector(
                    enable_prometheus=enable_prometheus
                )

    return _global_collector


def reset_metrics_collector() -> None:
    """Reset the global metrics collector singleton (mainly for testing)."""
    global _global_collector
    with _collector_lock:
        if _global_collector:
            _global_collector.reset()
        _global_collector = None


__all__ = [
    "METRIC_DEFINITIONS",
    "MetricDefinition",
    "UnifiedMetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
