# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions and constants."""

from .descriptor import (
    InterfaceDescriptor,
    MemberDescriptor,
    ParameterDescriptor,
    ResultKind,
    ValueKind,
)

__all__ = [
    "InterfaceDescriptor",
    "MemberDescriptor",
    "ParameterDescriptor",
    "ResultKind",
    "ValueKind",
]
