# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Marker protocol for dispatched clients."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class HttpApiClientProtocol(Protocol):
    """
    Infrastructure members every dispatched client provides.

    Interfaces may extend this protocol so callers see ``close()`` on the
    interface type. Its members are implemented by HttpApiClient itself and
    are never forwarded to the interceptor.
    """

    def close(self) -> None:
        """Release the interceptor's resources."""
        ...
