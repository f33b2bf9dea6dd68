# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request body content types and content merging helpers.

Contains the body descriptors a RequestMessage can hold and the pure
helpers used to merge url-encoded form fields into an existing body.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import IO, Any, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
MULTIPART_MEDIA_TYPE = "multipart/form-data"

FieldPairs = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


class BodyKind(Enum):
    """Kind of body held by a request."""

    NONE = "none"
    BYTES = "bytes"
    FORM = "form"
    MULTIPART = "multipart"


class PartKind(Enum):
    """Kind of a multipart part."""

    FILE = "file"
    TEXT = "text"


def encode_value(value: Any) -> str:
    """Percent-encode a single query, form or cookie value.

    None encodes as an empty string. Every character outside the RFC 3986
    unreserved set is escaped, so a space becomes ``%20``.
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        return quote(value, safe="")
    return quote(str(value), safe="")


def iter_pairs(pairs: FieldPairs) -> list[tuple[str, Any]]:
    """Materialize a mapping or an iterable of pairs into an ordered list."""
    if isinstance(pairs, Mapping):
        return list(pairs.items())
    return [(key, value) for key, value in pairs]


def form_encode(pairs: FieldPairs) -> bytes:
    """Encode pairs as ``key=value`` joined by ``&``; only values are escaped."""
    text = "&".join(f"{key}={encode_value(value)}" for key, value in iter_pairs(pairs))
    return text.encode("utf-8")


def concat_bytes(first: bytes | None, second: bytes | None) -> bytes:
    """Concatenate two byte strings, first before second; None counts as empty."""
    if not first:
        return second or b""
    if not second:
        return first
    return first + second


def merge_form_body(existing: bytes | None, pairs: FieldPairs) -> bytes:
    """Append url-encoded pairs to an existing form body.

    The new fields are separated from a non-empty existing body by ``&``.
    """
    encoded = form_encode(pairs)
    if existing:
        encoded = b"&" + encoded
    return concat_bytes(existing, encoded)


def same_media_type(first: str | None, second: str | None) -> bool:
    """Compare the media type part of two content types, ignoring case."""
    if first is None or second is None:
        return first is second
    return (
        first.split(";", 1)[0].strip().lower()
        == second.split(";", 1)[0].strip().lower()
    )


class ByteContent:
    """An in-memory body with an optional media type."""

    kind = BodyKind.BYTES

    def __init__(self, data: bytes, media_type: str | None = None) -> None:
        self._data = bytes(data)
        self.media_type = media_type

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def content_type(self) -> str | None:
        return self.media_type

    async def read(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(media_type={self.media_type!r}, size={len(self)})"


class FormContent(ByteContent):
    """A url-encoded form body."""

    kind = BodyKind.FORM

    def __init__(self, data: bytes) -> None:
        super().__init__(data, FORM_MEDIA_TYPE)


class MultipartPart(BaseModel):
    """One part of a multipart/form-data body.

    File parts carry a payload that is either bytes or a binary file-like
    object; text parts carry a string value.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: PartKind
    name: str
    value: str | None = None
    payload: Any = None
    filename: str | None = None
    content_type: str | None = None

    @classmethod
    def file(
        cls,
        payload: bytes | IO[bytes],
        name: str,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> MultipartPart:
        return cls(
            kind=PartKind.FILE,
            name=name,
            payload=payload,
            filename=filename,
            content_type=content_type,
        )

    @classmethod
    def text(cls, name: str, value: Any) -> MultipartPart:
        return cls(kind=PartKind.TEXT, name=name, value="" if value is None else str(value))


class MultipartContent:
    """An ordered multipart/form-data body with a fixed boundary."""

    kind = BodyKind.MULTIPART
    media_type = MULTIPART_MEDIA_TYPE

    def __init__(self, boundary: str | None = None) -> None:
        self.boundary = boundary or str(uuid.uuid4())
        self._parts: list[MultipartPart] = []

    @property
    def content_type(self) -> str:
        return f"{self.media_type}; boundary={self.boundary}"

    @property
    def parts(self) -> tuple[MultipartPart, ...]:
        return tuple(self._parts)

    def add(self, part: MultipartPart) -> None:
        self._parts.append(part)

    def __len__(self) -> int:
        return len(self._parts)

    def __repr__(self) -> str:
        return f"MultipartContent(boundary={self.boundary!r}, parts={len(self)})"


RequestContent = Union[ByteContent, MultipartContent]


__all__ = [
    "FORM_MEDIA_TYPE",
    "MULTIPART_MEDIA_TYPE",
    "BodyKind",
    "ByteContent",
    "FieldPairs",
    "FormContent",
    "MultipartContent",
    "MultipartPart",
    "PartKind",
    "RequestContent",
    "concat_bytes",
    "encode_value",
    "form_encode",
    "iter_pairs",
    "merge_form_body",
    "same_media_type",
]
