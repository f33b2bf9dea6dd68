# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Outgoing request message and its composition operations.

A RequestMessage is built up step by step by the code that handles one
intercepted call: query parameters are appended to the URI, form fields
are merged into a url-encoded body, file and text parts are added to a
multipart body, and cookies are written to the Cookie header.

The body keeps one content type once set. A url-encoded body never turns
into a multipart body or the other way round, and GET or HEAD requests
never get a body at all. Both rules raise UnsupportedOperationError.

A message belongs to the single call composing it and is not locked.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import IO, Any
from urllib.parse import urljoin

import httpx

from ..config import HttpApiConfig
from ..exceptions import ArgumentError, ConfigurationError, UnsupportedOperationError
from .content import (
    FORM_MEDIA_TYPE,
    MULTIPART_MEDIA_TYPE,
    BodyKind,
    ByteContent,
    FieldPairs,
    FormContent,
    MultipartContent,
    MultipartPart,
    PartKind,
    RequestContent,
    encode_value,
    iter_pairs,
    merge_form_body,
    same_media_type,
)

logger = logging.getLogger(__name__)

COOKIE_HEADER = "Cookie"
BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class RequestMessage:
    """
    One outgoing HTTP request under composition.

    Attributes:
        method: Upper-case HTTP method
        uri: Target URI, None until known
        headers: Case-insensitive, multi-valued header mapping
        content: Current body, None when no body has been set
        timeout: Optional timeout in seconds; metadata for the transport

    Example:
        >>> message = RequestMessage("POST", "http://api.example.com/users")
        >>> message.append_query("page", 2)
        >>> await message.merge_form_fields({"name": "ann"})
        >>> request = message.to_httpx_request()
    """

    def __init__(
        self,
        method: str = "GET",
        uri: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.method = method.upper()
        self.uri = uri
        self.headers = httpx.Headers(headers)
        self.content: RequestContent | None = None
        self.timeout = timeout

    @classmethod
    def create(
        cls, method: str, path: str, config: HttpApiConfig | None = None
    ) -> RequestMessage:
        """Create a message for ``path`` resolved against the configured host.

        Without a configured host an absolute ``path`` is used as is and a
        relative one leaves the URI unset.
        """
        config = config or HttpApiConfig()
        if config.http_host:
            uri: str | None = urljoin(config.http_host, path)
        elif httpx.URL(path).is_absolute_url:
            uri = path
        else:
            uri = None
        return cls(method, uri, headers=config.headers, timeout=config.timeout)

    # === State ===

    @property
    def body_kind(self) -> BodyKind:
        if self.content is None:
            return BodyKind.NONE
        return self.content.kind

    @property
    def content_type(self) -> str | None:
        if self.content is None:
            return None
        return self.content.content_type

    async def read_body(self) -> bytes:
        """
        Read the current body bytes; multipart bodies are rendered by httpx.

        Raises:
            ConfigurationError: If the body is multipart and the URI is not set
        """
        if self.content is None:
            return b""
        if isinstance(self.content, MultipartContent):
            return self.to_httpx_request().read()
        return await self.content.read()

    # === URI ===

    def append_query(self, key: str, value: Any) -> None:
        """
        Append ``key=value`` to the URI query string.

        Trailing ``?``, ``&`` and ``/`` are stripped before appending and the
        value is percent-encoded. Repeated keys are appended, never replaced.

        Raises:
            ConfigurationError: If the URI is not set
            ArgumentError: If key is empty
        """
        if self.uri is None:
            raise ConfigurationError(
                "Request URI is not set; configure http_host or give the request an absolute path"
            )
        if not key:
            raise ArgumentError("key")
        url = self.uri.rstrip("?&/")
        separator = "&" if "?" in url else "?"
        self.uri = f"{url}{separator}{key}={encode_value(value)}"

    def append_queries(self, pairs: FieldPairs) -> None:
        """Append several query parameters in order."""
        for key, value in iter_pairs(pairs):
            self.append_query(key, value)

    # === Body ===

    def set_content(self, data: bytes, media_type: str | None = None) -> None:
        """
        Replace the body with raw bytes, for example a serialized JSON payload.

        A form or multipart body can only be replaced by content of the same
        media type. The Content-Type header follows the new content and is
        removed when ``media_type`` is None.

        Raises:
            UnsupportedOperationError: On GET/HEAD, or if a form or multipart
                body would change its media type
        """
        self._ensure_body_allowed()
        current = self.content
        if current is not None and current.kind is not BodyKind.BYTES:
            if not same_media_type(current.media_type, media_type):
                raise UnsupportedOperationError(
                    f"Content-Type must remain {current.media_type}, "
                    f"cannot set {media_type} content",
                    method=self.method,
                    media_type=current.media_type,
                )

        if current is not None and current.kind is BodyKind.FORM:
            self.content = FormContent(data)
        else:
            self.content = ByteContent(data, media_type)
        if media_type:
            self.headers["Content-Type"] = media_type
        else:
            self.headers.pop("Content-Type", None)

    async def merge_form_fields(self, pairs: FieldPairs | None) -> None:
        """
        Merge url-encoded fields into the body.

        The existing body is read and the new fields are appended after it.
        Only values are percent-encoded. An empty or missing ``pairs`` leaves
        the body unchanged.

        Raises:
            UnsupportedOperationError: On GET/HEAD, or if the body has another
                content type
            ArgumentError: If a field name is empty
        """
        self._ensure_body_allowed()
        if pairs is None:
            return
        fields = iter_pairs(pairs)
        if not fields:
            return
        for name, _ in fields:
            if not name:
                raise ArgumentError("name")

        existing = b""
        if self.content is not None:
            self._ensure_media_type(self.content, FORM_MEDIA_TYPE)
            if isinstance(self.content, ByteContent):
                existing = await self.content.read()

        self.content = FormContent(merge_form_body(existing, fields))
        self.headers["Content-Type"] = FORM_MEDIA_TYPE

    async def add_form_field(self, name: str, value: Any) -> None:
        """Merge a single url-encoded field into the body."""
        self._ensure_body_allowed()
        if not name:
            raise ArgumentError("name")
        await self.merge_form_fields([(name, value)])

    def add_multipart_file(
        self,
        stream: bytes | IO[bytes],
        name: str,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> None:
        """
        Append a file part to the multipart body.

        Raises:
            UnsupportedOperationError: On GET/HEAD, or if the body has another
                content type
            ArgumentError: If name is empty
        """
        self._ensure_body_allowed()
        if not name:
            raise ArgumentError("name")
        multipart = self._multipart_content()
        multipart.add(MultipartPart.file(stream, name, filename, content_type))

    def add_multipart_text(self, name: str, value: Any) -> None:
        """
        Append a text field part to the multipart body.

        Raises:
            UnsupportedOperationError: On GET/HEAD, or if the body has another
                content type
            ArgumentError: If name is empty
        """
        self._ensure_body_allowed()
        if not name:
            raise ArgumentError("name")
        multipart = self._multipart_content()
        multipart.add(MultipartPart.text(name, value))

    def add_multipart_texts(self, pairs: FieldPairs) -> None:
        """Append several text field parts in order."""
        self._ensure_body_allowed()
        for name, value in iter_pairs(pairs):
            self.add_multipart_text(name, value)

    # === Headers ===

    def set_cookies(self, cookies: str | None) -> bool:
        """
        Replace the Cookie header with percent-encoded cookie pairs.

        ``cookies`` is a raw ``name=value; name2=value2`` string; values do
        not need to be encoded. Any existing Cookie header is removed first.

        Returns:
            True if a Cookie header was set, False if the result was empty
        """
        self.headers.pop(COOKIE_HEADER, None)
        encoded = _encode_cookies(cookies)
        if not encoded:
            return False
        self.headers[COOKIE_HEADER] = encoded
        return True

    # === Output ===

    def to_httpx_request(self) -> httpx.Request:
        """
        Build the httpx request the transport sends.

        The timeout travels in ``extensions["timeout"]`` where httpx
        transports read it. Multipart bodies are rendered by httpx with this
        message's boundary, parts in the order they were added.

        Raises:
            ConfigurationError: If the URI is not set
        """
        if self.uri is None:
            raise ConfigurationError("Request URI is not set")

        extensions: dict[str, Any] = {}
        if self.timeout is not None:
            extensions["timeout"] = httpx.Timeout(self.timeout).as_dict()

        headers = httpx.Headers(self.headers)
        if isinstance(self.content, MultipartContent):
            headers["Content-Type"] = self.content.content_type
            return httpx.Request(
                self.method,
                self.uri,
                headers=headers,
                files=_multipart_files(self.content),
                extensions=extensions,
            )

        content: bytes | None = None
        if isinstance(self.content, ByteContent):
            content = self.content.data
            if self.content.media_type:
                headers["Content-Type"] = self.content.media_type
        return httpx.Request(
            self.method,
            self.uri,
            headers=headers,
            content=content,
            extensions=extensions,
        )

    # === Internals ===

    def _ensure_body_allowed(self) -> None:
        if self.method in BODYLESS_METHODS:
            raise UnsupportedOperationError(
                f"{self.method} requests do not support a request body",
                method=self.method,
            )

    def _ensure_media_type(self, content: RequestContent, media_type: str) -> None:
        existing = self.headers.get("Content-Type") or content.media_type
        # A raw body without a media type accepts form fields.
        if existing is None and media_type == FORM_MEDIA_TYPE:
            return
        if not same_media_type(existing, media_type):
            raise UnsupportedOperationError(
                f"Content-Type must remain {existing}, cannot add {media_type} content",
                method=self.method,
                media_type=existing,
            )

    def _multipart_content(self) -> MultipartContent:
        if self.content is None:
            multipart = MultipartContent()
            self.content = multipart
            self.headers["Content-Type"] = multipart.content_type
            logger.debug(f"Created multipart body with boundary {multipart.boundary}")
            return multipart
        self._ensure_media_type(self.content, MULTIPART_MEDIA_TYPE)
        if not isinstance(self.content, MultipartContent):
            raise UnsupportedOperationError(
                "A raw multipart/form-data body cannot take additional parts",
                method=self.method,
                media_type=self.content.media_type,
            )
        return self.content

    def __repr__(self) -> str:
        return (
            f"RequestMessage(method={self.method!r}, uri={self.uri!r}, "
            f"body={self.body_kind.value}, timeout={self.timeout!r})"
        )


def _encode_cookies(cookies: str | None) -> str:
    if cookies is None:
        return ""
    pairs = []
    for item in cookies.split(";"):
        item = item.strip()
        if not item:
            continue
        name, _, value = item.partition("=")
        pairs.append(f"{name.strip()}={encode_value(value.strip())}")
    return "; ".join(pairs)


def _multipart_files(content: MultipartContent) -> list[tuple[str, Any]]:
    # Text parts render as fields without a filename, keeping part order.
    files: list[tuple[str, Any]] = []
    for part in content.parts:
        if part.kind is PartKind.TEXT:
            files.append((part.name, (None, (part.value or "").encode("utf-8"), None)))
        else:
            files.append((part.name, (part.filename, part.payload, part.content_type)))
    return files


def parse_query(uri: str) -> list[tuple[str, str]]:
    """Decode the query string of ``uri`` into ordered pairs."""
    return list(httpx.URL(uri).params.multi_items())


__all__ = [
    "BODYLESS_METHODS",
    "COOKIE_HEADER",
    "RequestMessage",
    "parse_query",
]

