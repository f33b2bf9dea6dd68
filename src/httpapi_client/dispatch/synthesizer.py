# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Dispatcher class synthesis.

For an interface descriptor this module builds a class deriving from
HttpApiClient and the interface, with one forwarding method per member.
Each forwarding method:

1. binds the call's arguments to the member signature and packs them,
   defaults applied, into a tuple in declaration order
2. looks up its descriptor in the instance's table by its fixed index
3. calls ``interceptor.intercept(self, descriptor, arguments)``
4. discards the result for ``-> None`` members, otherwise checks it
   against the declared result shape and returns it

The index captured by a forwarding method is the member's position in the
descriptor table it was built from. Instances must be wired with that same
table, which the registry guarantees by caching both together.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..exceptions import ConfigurationError
from ..observability.collector import UnifiedMetricsCollector
from ..observability.constants import CALLS_INTERCEPTED_TOTAL
from ..types.descriptor import InterfaceDescriptor, MemberDescriptor, ResultKind
from .base import HttpApiClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DispatcherFactory(Generic[T]):
    """
    Constructs dispatcher instances for one interface.

    Attributes:
        dispatcher_type: The synthesized class
        descriptor: The member table the class was built from
    """

    dispatcher_type: type
    descriptor: InterfaceDescriptor

    @property
    def interface(self) -> type:
        return self.descriptor.interface

    def __call__(
        self, interceptor: Any, descriptors: InterfaceDescriptor | None = None
    ) -> T:
        """Create a dispatcher wired to ``interceptor``.

        ``descriptors`` defaults to the table the class was built from.
        """
        if descriptors is None:
            descriptors = self.descriptor
        instance: T = self.dispatcher_type(interceptor, descriptors)
        return instance


def synthesize(
    descriptor: InterfaceDescriptor,
    metrics: UnifiedMetricsCollector | None = None,
) -> DispatcherFactory[Any]:
    """
    Build the dispatcher class for an interface.

    Args:
        descriptor: The collected member table of the interface
        metrics: Optional collector counting intercepted calls

    Raises:
        ConfigurationError: If no class deriving from HttpApiClient and the
            interface can be created, or the created class is still abstract
    """
    interface = descriptor.interface
    namespace: dict[str, Any] = {
        "__module__": interface.__module__,
        "__qualname__": f"{interface.__qualname__}Dispatcher",
        "__doc__": f"Dispatcher forwarding {interface.__qualname__} calls to an interceptor.",
    }
    for member in descriptor:
        namespace[member.name] = _forwarder(member, descriptor.name, metrics)

    if issubclass(interface, HttpApiClient):
        bases: tuple[type, ...] = (interface,)
    else:
        bases = (HttpApiClient, interface)

    try:
        dispatcher_type = type(f"{interface.__name__}Dispatcher", bases, namespace)
    except TypeError as e:
        raise ConfigurationError(
            f"Cannot build a dispatcher for {interface.__qualname__}: {e}",
            interface=interface,
        ) from e

    if inspect.isabstract(dispatcher_type):
        missing = ", ".join(sorted(getattr(dispatcher_type, "__abstractmethods__", ())))
        raise ConfigurationError(
            f"Dispatcher for {interface.__qualname__} leaves abstract members "
            f"that cannot be forwarded: {missing}",
            interface=interface,
        )

    logger.debug(
        f"Synthesized {dispatcher_type.__qualname__} with {len(descriptor)} forwarding members"
    )
    return DispatcherFactory(dispatcher_type=dispatcher_type, descriptor=descriptor)


def _forwarder(
    member: MemberDescriptor,
    interface_name: str,
    metrics: UnifiedMetricsCollector | None,
) -> Callable[..., Any]:
    signature = member.signature
    index = member.index
    names = member.parameter_names
    labels = {"interface": interface_name, "member": member.name}

    def forward(self: HttpApiClient, *args: Any, **kwargs: Any) -> Any:
        bound = signature.bind(self, *args, **kwargs)
        bound.apply_defaults()
        arguments = tuple(bound.arguments[name] for name in names)

        descriptor = self._descriptors[index]
        if metrics is not None:
            metrics.inc_counter(CALLS_INTERCEPTED_TOTAL, labels=labels)
        result = self._interceptor.intercept(self, descriptor, arguments)

        if descriptor.result_kind is ResultKind.VOID:
            return None
        return _check_result(descriptor, result)

    # Copy name, docstring and annotations but not __dict__, which would carry
    # __isabstractmethod__ over from the interface declaration.
    functools.update_wrapper(forward, member.function, updated=())
    return forward


def _check_result(descriptor: MemberDescriptor, result: Any) -> Any:
    if descriptor.result_kind is ResultKind.FUTURE:
        if not inspect.isawaitable(result):
            raise TypeError(
                f"{descriptor.name} must return an awaitable, "
                f"interceptor returned {type(result).__name__}"
            )
        return result

    expected = descriptor.result_type
    if expected is not None and result is not None and not isinstance(result, expected):
        raise TypeError(
            f"{descriptor.name} must return {expected.__name__}, "
            f"interceptor returned {type(result).__name__}"
        )
    return result


__all__ = ["DispatcherFactory", "synthesize"]
