"""Tests for the descriptor and dispatcher caches."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol
from unittest.mock import patch

import pytest

from httpapi_client.config import HttpApiConfig
from httpapi_client.dispatch import registry as registry_module
from httpapi_client.dispatch.registry import (
    DispatcherRegistry,
    OnceCache,
    get_registry,
    reset_registry,
)
from httpapi_client.exceptions import ConfigurationError
from httpapi_client.observability.constants import (
    DESCRIPTOR_CACHE_HITS_TOTAL,
    DESCRIPTOR_CACHE_MISSES_TOTAL,
    DISPATCHER_CACHE_HITS_TOTAL,
    DISPATCHER_CACHE_MISSES_TOTAL,
    DISPATCHER_SYNTHESIS_FAILURES_TOTAL,
    DISPATCHER_SYNTHESIS_SECONDS,
    DISPATCHERS_SYNTHESIZED_TOTAL,
)


class CatalogApi(Protocol):
    def list_items(self, page: int = 1) -> list: ...


class BrokenApi(Protocol):
    def search(self, *terms: str) -> list: ...


class TestOnceCache:
    """Get-or-create semantics."""

    def test_creates_once(self):
        """The factory runs once per key."""
        cache: OnceCache[str, int] = OnceCache()
        calls = []

        def create(key: str) -> int:
            calls.append(key)
            return len(key)

        assert cache.get_or_create("abc", create) == (3, True)
        assert cache.get_or_create("abc", create) == (3, False)
        assert calls == ["abc"]
        assert "abc" in cache
        assert len(cache) == 1
        assert cache.get("abc") == 3
        assert cache.get("missing") is None

    def test_failure_not_cached(self):
        """A failed creation is retried on the next call."""
        cache: OnceCache[str, int] = OnceCache()

        def fail(key: str) -> int:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            cache.get_or_create("k", fail)
        assert "k" not in cache
        assert cache.get_or_create("k", lambda key: 1) == (1, True)

    def test_concurrent_callers_share_creation(self):
        """Concurrent callers wait for one creation."""
        cache: OnceCache[str, object] = OnceCache()
        calls = []

        def create(key: str) -> object:
            calls.append(key)
            time.sleep(0.05)
            return object()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: cache.get_or_create("k", create), range(8)))

        assert calls == ["k"]
        values = {id(value) for value, _ in results}
        assert len(values) == 1
        assert sum(created for _, created in results) == 1

    def test_concurrent_callers_share_failure(self):
        """Concurrent callers all see the same failure."""
        cache: OnceCache[str, object] = OnceCache()
        calls = []

        def create(key: str) -> object:
            calls.append(key)
            time.sleep(0.2)
            raise ValueError("cannot create")

        def attempt(_: int) -> str:
            try:
                cache.get_or_create("k", create)
            except ValueError as e:
                return str(e)
            return "created"

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(attempt, range(8)))

        assert outcomes == ["cannot create"] * 8
        assert calls == ["k"]


class TestDispatcherRegistry:
    """Registry caching and metrics."""

    def test_factory_cached(self, registry):
        """The same factory is returned for an interface."""
        first = registry.get_or_create_dispatcher(CatalogApi)
        second = registry.get_or_create_dispatcher(CatalogApi)
        assert first is second
        assert CatalogApi in registry
        assert len(registry) == 1

    def test_descriptor_shared_with_factory(self, registry):
        """The factory uses the cached descriptor table."""
        descriptor = registry.get_descriptor(CatalogApi)
        factory = registry.get_or_create_dispatcher(CatalogApi)
        assert factory.descriptor is descriptor

    def test_cache_metrics(self, registry, metrics):
        """Factory lookups are counted as dispatcher cache hits and misses."""
        registry.get_or_create_dispatcher(CatalogApi)
        registry.get_or_create_dispatcher(CatalogApi)
        registry.get_or_create_dispatcher(CatalogApi)

        labels = {"interface": "CatalogApi"}
        assert metrics.get_counter(DISPATCHER_CACHE_MISSES_TOTAL) == 1
        assert metrics.get_counter(DISPATCHER_CACHE_HITS_TOTAL) == 2
        assert metrics.get_counter(DESCRIPTOR_CACHE_MISSES_TOTAL) == 1
        assert metrics.get_counter(DESCRIPTOR_CACHE_HITS_TOTAL) == 0
        assert metrics.get_counter(DISPATCHERS_SYNTHESIZED_TOTAL, labels=labels) == 1
        histograms = metrics.get_metrics()["histograms"]
        assert histograms[DISPATCHER_SYNTHESIS_SECONDS]["interface=CatalogApi"]["count"] == 1

    def test_descriptor_cache_metrics(self, registry, metrics):
        """Member table lookups are counted separately from factory lookups."""
        registry.get_descriptor(CatalogApi)
        registry.get_descriptor(CatalogApi)
        registry.get_or_create_dispatcher(CatalogApi)

        assert metrics.get_counter(DESCRIPTOR_CACHE_MISSES_TOTAL) == 1
        assert metrics.get_counter(DESCRIPTOR_CACHE_HITS_TOTAL) == 2
        assert metrics.get_counter(DISPATCHER_CACHE_MISSES_TOTAL) == 1
        assert metrics.get_counter(DISPATCHER_CACHE_HITS_TOTAL) == 0

    def test_failure_counted_and_not_cached(self, registry, metrics):
        """Failed synthesis is counted and not cached."""
        with pytest.raises(ConfigurationError):
            registry.get_or_create_dispatcher(BrokenApi)
        with pytest.raises(ConfigurationError):
            registry.get_or_create_dispatcher(BrokenApi)

        labels = {"interface": "BrokenApi"}
        assert metrics.get_counter(DISPATCHER_SYNTHESIS_FAILURES_TOTAL, labels=labels) == 2
        assert BrokenApi not in registry

    def test_concurrent_first_use_synthesizes_once(self, registry):
        """Concurrent first use synthesizes once."""
        real_synthesize = registry_module.synthesize

        def slow_synthesize(*args, **kwargs):
            time.sleep(0.05)
            return real_synthesize(*args, **kwargs)

        with patch.object(registry_module, "synthesize", side_effect=slow_synthesize) as mock:
            with ThreadPoolExecutor(max_workers=8) as pool:
                factories = list(
                    pool.map(lambda _: registry.get_or_create_dispatcher(CatalogApi), range(8))
                )

        assert mock.call_count == 1
        assert all(factory is factories[0] for factory in factories)

    def test_concurrent_failure_shared_then_retried(self, registry):
        """A shared failure is retried by the next caller."""
        real_synthesize = registry_module.synthesize
        attempts = []

        def flaky_synthesize(*args, **kwargs):
            attempts.append(args)
            time.sleep(0.2)
            if len(attempts) == 1:
                raise ConfigurationError("transient", interface=CatalogApi)
            return real_synthesize(*args, **kwargs)

        def attempt(_: int) -> str:
            try:
                registry.get_or_create_dispatcher(CatalogApi)
            except ConfigurationError as e:
                return str(e)
            return "ok"

        with patch.object(registry_module, "synthesize", side_effect=flaky_synthesize):
            with ThreadPoolExecutor(max_workers=4) as pool:
                outcomes = list(pool.map(attempt, range(4)))
            assert outcomes == ["transient"] * 4
            assert CatalogApi not in registry

            assert registry.get_or_create_dispatcher(CatalogApi) is not None
        assert len(attempts) == 2

    def test_metrics_disabled(self):
        """The registry works without metrics."""
        registry = DispatcherRegistry(metrics_enabled=False)
        factory = registry.get_or_create_dispatcher(CatalogApi)
        assert factory.interface is CatalogApi

    def test_from_config(self):
        """Verify the registry is built from configuration."""
        registry = DispatcherRegistry.from_config(HttpApiConfig(metrics_enabled=False))
        assert registry.get_or_create_dispatcher(CatalogApi).interface is CatalogApi


class TestRegistrySingleton:
    """Process-wide registry access."""

    def test_same_instance_returned(self):
        """get_registry returns one instance."""
        assert get_registry() is get_registry()

    def test_reset_creates_new_instance(self):
        """reset_registry discards the instance."""
        first = get_registry()
        reset_registry()
        assert get_registry() is not first
