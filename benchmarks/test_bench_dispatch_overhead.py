"""
Benchmark: Dispatch Overhead

Measures the overhead a synthesized dispatcher adds to each call, and
the one-time cost of collecting and synthesizing an interface. The
interceptor answers instantly, so any measured time is pure overhead.

Usage:
    uv run pytest benchmarks/test_bench_dispatch_overhead.py -v --no-cov
"""

import pytest
import time

from httpapi_client import RequestMessage, create_client


class TestDispatchOverhead:
    """Benchmark per-call forwarding cost."""

    def test_value_member_overhead(self, benchmark_api, benchmark_registry, benchmark_interceptor):
        """Measure a single-argument call returning a value."""
        api = create_client(benchmark_api, benchmark_interceptor, registry=benchmark_registry)

        # Warmup
        for _ in range(100):
            api.get("warmup")

        iterations = 10000
        start = time.perf_counter()
        for i in range(iterations):
            api.get(f"key-{i}")
        elapsed = time.perf_counter() - start

        avg_us = (elapsed / iterations) * 1_000_000
        print("\n--- Value Member Dispatch Overhead ---")
        print(f"Iterations: {iterations}")
        print(f"Total time: {elapsed:.4f}s")
        print(f"Average latency: {avg_us:.2f}us per call")

        assert avg_us < 500, f"Overhead too high: {avg_us:.2f}us"

    def test_defaults_applied_overhead(self, benchmark_api, benchmark_registry, benchmark_interceptor):
        """Measure calls whose trailing parameters come from defaults."""
        api = create_client(benchmark_api, benchmark_interceptor, registry=benchmark_registry)

        iterations = 10000
        start = time.perf_counter()
        for _ in range(iterations):
            api.search("term")
        elapsed = time.perf_counter() - start

        avg_us = (elapsed / iterations) * 1_000_000
        print("\n--- Defaults Applied Dispatch Overhead ---")
        print(f"Average latency: {avg_us:.2f}us per call")

        assert avg_us < 500, f"Overhead too high: {avg_us:.2f}us"

    @pytest.mark.asyncio
    async def test_future_member_overhead(self, benchmark_api, benchmark_registry, benchmark_interceptor):
        """Measure an async member, including awaiting the interceptor's coroutine."""
        api = create_client(benchmark_api, benchmark_interceptor, registry=benchmark_registry)

        iterations = 5000
        start = time.perf_counter()
        for i in range(iterations):
            await api.fetch(f"key-{i}")
        elapsed = time.perf_counter() - start

        avg_us = (elapsed / iterations) * 1_000_000
        print("\n--- Future Member Dispatch Overhead ---")
        print(f"Average latency: {avg_us:.2f}us per call")

        assert avg_us < 1000, f"Overhead too high: {avg_us:.2f}us"

    def test_synthesis_cost(self, benchmark_api, benchmark_config):
        """Measure first-use collection and synthesis on fresh registries."""
        from httpapi_client import DispatcherRegistry

        iterations = 200
        start = time.perf_counter()
        for _ in range(iterations):
            DispatcherRegistry.from_config(benchmark_config).get_or_create_dispatcher(benchmark_api)
        elapsed = time.perf_counter() - start

        avg_ms = (elapsed / iterations) * 1000
        print("\n--- Dispatcher Synthesis Cost ---")
        print(f"Average: {avg_ms:.3f}ms per interface")

        assert avg_ms < 50, f"Synthesis too slow: {avg_ms:.3f}ms"

    @pytest.mark.asyncio
    async def test_request_composition_overhead(self, benchmark_config):
        """Measure composing a form request and converting it for httpx."""
        iterations = 2000
        start = time.perf_counter()
        for i in range(iterations):
            message = RequestMessage.create("POST", "/items", benchmark_config)
            message.append_query("page", i)
            await message.merge_form_fields({"name": "item", "note": "a b c"})
            message.set_cookies("session=abc; theme=dark")
            message.to_httpx_request()
        elapsed = time.perf_counter() - start

        avg_us = (elapsed / iterations) * 1_000_000
        print("\n--- Request Composition Overhead ---")
        print(f"Average: {avg_us:.2f}us per request")

        assert avg_us < 2000, f"Composition too slow: {avg_us:.2f}us"
