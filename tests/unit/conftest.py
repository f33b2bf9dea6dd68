"""Shared fixtures for the unit tests."""

from __future__ import annotations

from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from httpapi_client.dispatch.registry import DispatcherRegistry, reset_registry
from httpapi_client.observability.collector import (
    UnifiedMetricsCollector,
    reset_metrics_collector,
)


class RecordingInterceptor:
    """Interceptor that records every forwarded call.

    ``result`` is returned as is, or called with (descriptor, arguments)
    when callable.
    """

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.calls: list[tuple[Any, Any, tuple[Any, ...]]] = []
        self.closed = False

    def intercept(self, target: Any, descriptor: Any, arguments: tuple[Any, ...]) -> Any:
        self.calls.append((target, descriptor, arguments))
        if callable(self.result):
            return self.result(descriptor, arguments)
        return self.result

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _reset_singletons():
    yield
    reset_registry()
    reset_metrics_collector()


@pytest.fixture
def metrics() -> UnifiedMetricsCollector:
    return UnifiedMetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def registry(metrics: UnifiedMetricsCollector) -> DispatcherRegistry:
    return DispatcherRegistry(metrics=metrics)


@pytest.fixture
def interceptor() -> RecordingInterceptor:
    return RecordingInterceptor()
