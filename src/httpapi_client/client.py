# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Client creation entry point."""

from typing import Any, TypeVar

from .dispatch.registry import DispatcherRegistry, get_registry

T = TypeVar("T")


def create_client(
    interface: type[T],
    interceptor: Any,
    registry: DispatcherRegistry | None = None,
) -> T:
    """
    Create an object implementing ``interface`` whose calls go to ``interceptor``.

    The dispatcher class is synthesized on first use and reused afterwards.

    Args:
        interface: The interface class to implement
        interceptor: Object with an ``intercept(target, descriptor, arguments)``
            method (see ApiInterceptorProtocol)
        registry: Registry to use; defaults to the process-wide registry

    Raises:
        ConfigurationError: If the interface cannot be dispatched

    Example:
        >>> api = create_client(UserApi, interceptor)
        >>> user = await api.get_by_id("42")
    """
    factory = (registry or get_registry()).get_or_create_dispatcher(interface)
    client: T = factory(interceptor)
    return client


__all__ = ["create_client"]
