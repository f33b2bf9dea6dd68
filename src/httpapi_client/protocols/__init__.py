# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for client components.

Available protocols:
- ApiInterceptorProtocol: The single entry point every forwarded call reaches
- HttpApiClientProtocol: Infrastructure members excluded from forwarding
"""

from .client import HttpApiClientProtocol
from .interceptor import ApiInterceptorProtocol

__all__ = [
    "ApiInterceptorProtocol",
    "HttpApiClientProtocol",
]
