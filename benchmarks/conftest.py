"""
Shared fixtures for benchmark tests.
"""

import pytest
from typing import Any, Protocol, Tuple

from httpapi_client import DispatcherRegistry, HttpApiConfig, MemberDescriptor


class BenchmarkApi(Protocol):
    """Interface with the member shapes benchmarked below."""

    def get(self, key: str) -> dict: ...

    def search(self, query: str, page: int = 1, limit: int = 50) -> dict: ...

    def notify(self, event: str) -> None: ...

    async def fetch(self, key: str) -> dict: ...


class BenchmarkInterceptor:
    """Interceptor that answers instantly, so measured time is dispatch overhead."""

    def __init__(self) -> None:
        self.result = {"result": "instant"}

    def intercept(self, target: Any, descriptor: MemberDescriptor, arguments: Tuple[Any, ...]) -> Any:
        if descriptor.name == "fetch":
            return self._resolved()
        return self.result

    async def _resolved(self) -> dict:
        return self.result


@pytest.fixture
def benchmark_config():
    """Configuration with metrics disabled for raw overhead numbers."""
    return HttpApiConfig(http_host="https://benchmark.test", metrics_enabled=False)


@pytest.fixture
def benchmark_registry(benchmark_config):
    """Fresh registry per benchmark."""
    return DispatcherRegistry.from_config(benchmark_config)


@pytest.fixture
def benchmark_interceptor():
    """Benchmark interceptor instance."""
    return BenchmarkInterceptor()


@pytest.fixture
def benchmark_api():
    """The benchmarked interface class."""
    return BenchmarkApi
