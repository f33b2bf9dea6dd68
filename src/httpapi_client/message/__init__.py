# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request message model and body composition.

Classes:
    RequestMessage: One outgoing request under composition.
    ByteContent, FormContent, MultipartContent: Body descriptors.
    MultipartPart: One file or text part of a multipart body.

Functions:
    form_encode: Encode pairs as an url-encoded form body.
    concat_bytes: Ordered, None-safe byte concatenation.
"""

from .content import (
    FORM_MEDIA_TYPE,
    MULTIPART_MEDIA_TYPE,
    BodyKind,
    ByteContent,
    FormContent,
    MultipartContent,
    MultipartPart,
    PartKind,
    concat_bytes,
    encode_value,
    form_encode,
    merge_form_body,
)
from .request import BODYLESS_METHODS, COOKIE_HEADER, RequestMessage, parse_query

__all__ = [
    "BODYLESS_METHODS",
    "COOKIE_HEADER",
    "FORM_MEDIA_TYPE",
    "MULTIPART_MEDIA_TYPE",
    "BodyKind",
    "ByteContent",
    "FormContent",
    "MultipartContent",
    "MultipartPart",
    "PartKind",
    "RequestMessage",
    "concat_bytes",
    "encode_value",
    "form_encode",
    "merge_form_body",
    "parse_query",
]
