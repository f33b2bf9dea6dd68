# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Process-wide registry of descriptor tables and dispatcher factories.

Both caches are keyed by interface class, populated lazily on first use,
kept for the lifetime of the registry and never evicted. The number of
entries is bounded by the number of interfaces a program dispatches, so
the caches are deliberately unbounded.

Concurrent first requests for the same interface share one outcome: the
first caller collects and synthesizes while the others wait for its
result, or for its exception. A failed attempt is not cached, so a later
request tries again.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from typing import Any, Generic, TypeVar

from ..config import HttpApiConfig
from ..observability.collector import UnifiedMetricsCollector, get_metrics_collector
from ..observability.constants import (
    DESCRIPTOR_CACHE_HITS_TOTAL,
    DESCRIPTOR_CACHE_MISSES_TOTAL,
    DISPATCHER_CACHE_HITS_TOTAL,
    DISPATCHER_CACHE_MISSES_TOTAL,
    DISPATCHER_SYNTHESIS_FAILURES_TOTAL,
    DISPATCHER_SYNTHESIS_SECONDS,
    DISPATCHERS_SYNTHESIZED_TOTAL,
)
from ..types.descriptor import InterfaceDescriptor
from .collector import DEFAULT_EXCLUDED, collect
from .synthesizer import DispatcherFactory, synthesize

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class OnceCache(Generic[K, V]):
    """
    A get-or-create map that runs the creator at most once per key at a time.

    Thread Safety:
        The lock only guards the maps; the creator runs outside it so
        different keys are created concurrently. Callers arriving while a
        key is being created block on the creator's Future.
    """

    def __init__(self) -> None:
        self._values: dict[K, V] = {}
        self._pending: dict[K, Future[V]] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._values.get(key)

    def get_or_create(self, key: K, create: Callable[[K], V]) -> tuple[V, bool]:
        """
        Return the value for ``key``, creating it if needed.

        Returns:
            The value and whether this call created it

        Raises:
            Whatever ``create`` raised, in the creating caller and in every
            caller that waited on the same attempt
        """
        with self._lock:
            if key in self._values:
                return self._values[key], False
            pending = self._pending.get(key)
            owner = pending is None
            if pending is None:
                pending = Future()
                self._pending[key] = pending

        if not owner:
            return pending.result(), False

        try:
            value = create(key)
        except BaseException as e:
            with self._lock:
                del self._pending[key]
            pending.set_exception(e)
            raise

        with self._lock:
            self._values[key] = value
            del self._pending[key]
        pending.set_result(value)
        return value, True

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


class DispatcherRegistry:
    """
    Owns the descriptor and dispatcher caches.

    Example:
        >>> registry = DispatcherRegistry()
        >>> factory = registry.get_or_create_dispatcher(UserApi)
        >>> client = factory(interceptor)
    """

    def __init__(
        self,
        excluded: Iterable[type] = DEFAULT_EXCLUDED,
        metrics: UnifiedMetricsCollector | None = None,
        metrics_enabled: bool = True,
    ) -> None:
        """
        Initialize the registry.

        Args:
            excluded: Baseline capabilities whose members are not forwarded
            metrics: Collector to report to; defaults to the global collector
            metrics_enabled: Set False to record no metrics at all
        """
        self._excluded = tuple(excluded)
        if metrics_enabled:
            self._metrics: UnifiedMetricsCollector | None = (
                metrics or get_metrics_collector()
            )
        else:
            self._metrics = None
        self._descriptors: OnceCache[type, InterfaceDescriptor] = OnceCache()
        self._factories: OnceCache[type, DispatcherFactory[Any]] = OnceCache()

    @classmethod
    def from_config(cls, config: HttpApiConfig) -> DispatcherRegistry:
        """Create a registry honouring the config's metrics switch."""
        return cls(metrics_enabled=config.metrics_enabled)

    @property
    def excluded(self) -> tuple[type, ...]:
        return self._excluded

    def get_descriptor(self, interface: type) -> InterfaceDescriptor:
        """Return the cached member table of ``interface``, collecting it once."""
        descriptor, created = self._descriptors.get_or_create(interface, self._collect)
        if self._metrics is not None:
            name = DESCRIPTOR_CACHE_MISSES_TOTAL if created else DESCRIPTOR_CACHE_HITS_TOTAL
            self._metrics.inc_counter(name)
        return descriptor

    def get_or_create_dispatcher(self, interface: type) -> DispatcherFactory[Any]:
        """
        Return the dispatcher factory for ``interface``, synthesizing it once.

        Raises:
            ConfigurationError: If the interface cannot be collected or no
                dispatcher class can be built for it
        """
        factory, created = self._factories.get_or_create(interface, self._synthesize)
        if self._metrics is not None:
            name = DISPATCHER_CACHE_MISSES_TOTAL if created else DISPATCHER_CACHE_HITS_TOTAL
            self._metrics.inc_counter(name)
        return factory

    def _collect(self, interface: type) -> InterfaceDescriptor:
        return collect(interface, self._excluded)

    def _synthesize(self, interface: type) -> DispatcherFactory[Any]:
        labels = {"interface": interface.__qualname__}
        start = time.perf_counter()
        try:
            descriptor = self.get_descriptor(interface)
            factory = synthesize(descriptor, self._metrics)
        except Exception:
            if self._metrics is not None:
                self._metrics.inc_counter(DISPATCHER_SYNTHESIS_FAILURES_TOTAL, labels=labels)
            raise

        elapsed = time.perf_counter() - start
        if self._metrics is not None:
            self._metrics.inc_counter(DISPATCHERS_SYNTHESIZED_TOTAL, labels=labels)
            self._metrics.observe_histogram(DISPATCHER_SYNTHESIS_SECONDS, elapsed, labels=labels)
        logger.info(
            f"Dispatcher for {interface.__qualname__} synthesized "
            f"({len(factory.descriptor)} members, {elapsed * 1000:.2f}ms)"
        )
        return factory

    def __contains__(self, interface: object) -> bool:
        return interface in self._factories

    def __len__(self) -> int:
        return len(self._factories)


# =============================================================================
# Singleton Pattern
# =============================================================================

_global_registry: DispatcherRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> DispatcherRegistry:
    """Get or create the process-wide dispatcher registry."""
    global _global_registry

    if _global_registry is None:
        with _registry_lock:
            if _global_registry is None:
                _global_registry = DispatcherRegistry()

    return _global_registry


def reset_registry() -> None:
    """Drop the process-wide registry (mainly for testing)."""
    global _global_registry
    with _registry_lock:
        _global_registry = None


__all__ = [
    "DispatcherRegistry",
    "OnceCache",
    "get_registry",
    "reset_registry",
]
