# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the httpapi client library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from HttpApiError, making it easy to catch
all client-related exceptions with a single except clause.
"""


class HttpApiError(Exception):
    """Base exception for all httpapi client errors.

    This is the root exception class for the library. Catch this exception
    to handle any error originating from dispatcher synthesis or request
    composition.

    Example:
        try:
            client = create_client(UserApi, interceptor)
        except HttpApiError as e:
            logger.error(f"Client setup failed: {e}")
    """

    pass


class ConfigurationError(HttpApiError):
    """Raised when an interface or request cannot be configured.

    Common causes include:
    - Appending a query parameter before the request URI is known
    - An interface member with its own type parameters
    - An interface member with variadic (``*args`` / ``**kwargs``) parameters
    - An interface for which no dispatcher class can be constructed

    Attributes:
        interface: The interface class involved, when known.
        member: The member name involved, when known.

    Example:
        try:
            client = create_client(UserApi, interceptor)
        except ConfigurationError as e:
            logger.error(f"{e.interface} cannot be dispatched: {e}")
            raise SystemExit(1)
    """

    def __init__(
        self,
        message: str,
        interface: type | None = None,
        member: str | None = None,
    ):
        super().__init__(message)
        self.interface = interface
        self.member = member


class UnsupportedOperationError(HttpApiError):
    """Raised when a body composition step conflicts with the request state.

    The body of a request keeps a single content type once set. Mixing a
    url-encoded form with multipart parts fails, and so does composing any
    body on a GET or HEAD request.

    Attributes:
        method: The HTTP method of the request.
        media_type: The media type already present on the body, if any.
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        media_type: str | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.media_type = media_type


class ArgumentError(HttpApiError, ValueError):
    """Raised when a required field or part name is empty or missing.

    Attributes:
        argument: Name of the offending argument.
    """

    def __init__(self, argument: str, message: str | None = None):
        super().__init__(message or f"Argument '{argument}' must not be empty")
        self.argument = argument
