# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Descriptor types for dispatched interfaces.

This module defines the metadata records the collector produces for an
interface and the dispatcher consumes when it forwards a call. A member's
position in its InterfaceDescriptor is the only link between a forwarding
method and its descriptor, so descriptor sequences are immutable tuples.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, overload


class ValueKind(Enum):
    """How a parameter value is carried.

    - SCALAR: plain values (numbers, strings, bytes, booleans, enums)
    - REFERENCE: any other object, passed through unchanged
    """

    SCALAR = "scalar"
    REFERENCE = "reference"


class ResultKind(Enum):
    """Declared result shape of an interface member.

    - VOID: the member returns nothing; the interception result is discarded
    - VALUE: the member returns the interception result directly
    - FUTURE: the member returns an awaitable produced by the interceptor
    """

    VOID = "void"
    VALUE = "value"
    FUTURE = "future"


@dataclass(frozen=True)
class ParameterDescriptor:
    """A single declared parameter of an interface member (``self`` excluded)."""

    name: str
    value_kind: ValueKind
    position: int
    annotation: Any = inspect.Parameter.empty
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty


@dataclass(frozen=True)
class MemberDescriptor:
    """
    Metadata for one dispatched interface member.

    Attributes:
        name: Member name as declared on the interface
        parameters: Declared parameters in order, ``self`` excluded
        result_kind: Declared result shape
        index: Position of this member in its InterfaceDescriptor
        function: The interface's own function object; routing schemes
            read attributes they attached to it via get_metadata()
        owner: The class that declared the member
        result_type: Annotated return class used to check interceptor
            results for VALUE members, None when not a plain class
    """

    name: str
    parameters: tuple[ParameterDescriptor, ...]
    result_kind: ResultKind
    index: int
    function: Callable[..., Any] = field(repr=False, compare=False)
    owner: type = field(repr=False, compare=False)
    result_type: type | None = field(default=None, compare=False)

    @property
    def signature(self) -> inspect.Signature:
        return inspect.signature(self.function)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters)

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Return an attribute attached to the member's function, if any."""
        return getattr(self.function, key, default)


@dataclass(frozen=True)
class InterfaceDescriptor:
    """
    The ordered member table of one interface.

    Created once per interface class and kept for the process lifetime.
    Indexable by position (the dispatcher contract) and searchable by name.
    """

    interface: type
    members: tuple[MemberDescriptor, ...]

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[MemberDescriptor]:
        return iter(self.members)

    @overload
    def __getitem__(self, index: int) -> MemberDescriptor: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[MemberDescriptor, ...]: ...

    def __getitem__(
        self, index: int | slice
    ) -> MemberDescriptor | tuple[MemberDescriptor, ...]:
        return self.members[index]

    @property
    def name(self) -> str:
        return self.interface.__qualname__

    def find(self, name: str) -> MemberDescriptor | None:
        """Look up a member by name."""
        for member in self.members:
            if member.name == name:
                return member
        return None


__all__ = [
    "InterfaceDescriptor",
    "MemberDescriptor",
    "ParameterDescriptor",
    "ResultKind",
    "ValueKind",
]
