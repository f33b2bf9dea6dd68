# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""httpapi client - Call remote HTTP APIs through plain Python interfaces.

Describe a remote API as an interface class and get an object implementing
it whose every call is forwarded, with the member's descriptor and
arguments, to a single interceptor. The interceptor composes the outgoing
request with RequestMessage and hands it to a transport.

Key Features:
    - Dispatcher classes synthesized per interface and cached process-wide
    - Positional descriptor tables shared by every dispatcher instance
    - Request composition for query strings, url-encoded forms, multipart
      parts and cookies, with content-type consistency checks
    - httpx request output and Prometheus metrics

Quick Start:
    >>> from typing import Protocol
    >>> from httpapi_client import RequestMessage, create_client
    >>>
    >>> class UserApi(Protocol):
    ...     async def get_by_id(self, id: str) -> dict: ...
    >>>
    >>> class Interceptor:
    ...     def intercept(self, target, descriptor, arguments):
    ...         message = RequestMessage("GET", "http://api.example.com/user")
    ...         message.append_query("id", arguments[0])
    ...         return transport.send(message.to_httpx_request())
    >>>
    >>> api = create_client(UserApi, Interceptor())
    >>> user = await api.get_by_id("42")

Main Exports:
    - create_client: Build a client for an interface
    - DispatcherRegistry, get_registry: Dispatcher caches
    - RequestMessage: Request composition
    - HttpApiConfig: Configuration options
    - ApiInterceptorProtocol, HttpApiClientProtocol: Protocols

Version: 1.0.0
"""

__version__ = "1.0.0"

from .client import create_client
from .config import HttpApiConfig
from .dispatch import (
    DEFAULT_EXCLUDED,
    DispatcherFactory,
    DispatcherRegistry,
    HttpApiClient,
    collect,
    get_registry,
    reset_registry,
    synthesize,
)
from .exceptions import (
    ArgumentError,
    ConfigurationError,
    HttpApiError,
    UnsupportedOperationError,
)
from .message import (
    BodyKind,
    ByteContent,
    FormContent,
    MultipartContent,
    MultipartPart,
    RequestMessage,
    concat_bytes,
    form_encode,
)
from .protocols import ApiInterceptorProtocol, HttpApiClientProtocol
from .types import (
    InterfaceDescriptor,
    MemberDescriptor,
    ParameterDescriptor,
    ResultKind,
    ValueKind,
)

__all__ = [
    "DEFAULT_EXCLUDED",
    # Protocols
    "ApiInterceptorProtocol",
    "ArgumentError",
    # Message
    "BodyKind",
    "ByteContent",
    # Exceptions
    "ConfigurationError",
    # Dispatch
    "DispatcherFactory",
    "DispatcherRegistry",
    "FormContent",
    "HttpApiClient",
    "HttpApiClientProtocol",
    # Configuration
    "HttpApiConfig",
    "HttpApiError",
    # Descriptors
    "InterfaceDescriptor",
    "MemberDescriptor",
    "MultipartContent",
    "MultipartPart",
    "ParameterDescriptor",
    "RequestMessage",
    "ResultKind",
    "UnsupportedOperationError",
    "ValueKind",
    "collect",
    "concat_bytes",
    "create_client",
    "form_encode",
    "get_registry",
    "reset_registry",
    "synthesize",
]
