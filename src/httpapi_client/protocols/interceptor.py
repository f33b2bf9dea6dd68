# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for the interception entry point."""

from typing import Any, Protocol, runtime_checkable

from ..types.descriptor import MemberDescriptor


@runtime_checkable
class ApiInterceptorProtocol(Protocol):
    """
    Receives every call made on a dispatcher.

    The dispatcher passes itself, the descriptor of the member that was
    called and the call's arguments in declaration order. The interceptor
    decides how to turn the call into a request, usually by reading routing
    metadata from ``descriptor.function`` and composing a RequestMessage.

    For members declared ``async def`` (or returning an awaitable) the
    result must be awaitable. For other members it must match the
    declared return class, and for ``-> None`` members it is discarded.
    """

    def intercept(
        self,
        target: Any,
        descriptor: MemberDescriptor,
        arguments: tuple[Any, ...],
    ) -> Any:
        """Handle one forwarded call and return its result."""
        ...
