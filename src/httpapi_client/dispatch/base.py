# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base class of every synthesized dispatcher.
"""

from __future__ import annotations

import inspect
import logging
from types import TracebackType
from typing import Any

from typing_extensions import Self

from ..types.descriptor import InterfaceDescriptor

logger = logging.getLogger(__name__)


class HttpApiClient:
    """
    Common construction contract of dispatchers.

    A dispatcher is wired with the interceptor that receives its calls and
    the descriptor table its forwarding methods index into. The lifecycle
    members here (``close`` and the context manager protocol) are served
    locally and never reach the interceptor.
    """

    def __init__(self, interceptor: Any, descriptors: InterfaceDescriptor) -> None:
        self._interceptor = interceptor
        self._descriptors = descriptors

    @property
    def interceptor(self) -> Any:
        return self._interceptor

    @property
    def descriptors(self) -> InterfaceDescriptor:
        return self._descriptors

    def close(self) -> None:
        """Close the interceptor if it owns resources."""
        close = getattr(self._interceptor, "close", None)
        if callable(close):
            logger.debug(f"Closing interceptor of {self._descriptors.name} client")
            close()

    async def aclose(self) -> None:
        """Close the interceptor, awaiting its ``aclose`` when it has one."""
        aclose = getattr(self._interceptor, "aclose", None)
        if callable(aclose):
            result = aclose()
            if inspect.isawaitable(result):
                await result
        else:
            self.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} for {self._descriptors.name}>"


__all__ = ["HttpApiClient"]
