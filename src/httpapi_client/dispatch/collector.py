# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Member collection for dispatched interfaces.

The collector turns an interface class into the ordered member table a
dispatcher forwards by position. Members are gathered along the MRO, most
derived class first, each class in definition order, and de-duplicated by
name so an override replaces the base declaration. Members of excluded
baseline capabilities (disposal, the client marker protocol) are dropped
so they are served locally instead of reaching the interceptor. A member
of the interface's own that shares a name with the client base is
rejected, because the base would shadow it.

The resulting order is a pure function of the class hierarchy, so every
collection for the same interface yields the same table.
"""

from __future__ import annotations

import abc
import asyncio
import collections.abc
import contextlib
import inspect
import logging
import types
import typing
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

from ..exceptions import ConfigurationError
from ..protocols.client import HttpApiClientProtocol
from ..types.descriptor import (
    InterfaceDescriptor,
    MemberDescriptor,
    ParameterDescriptor,
    ResultKind,
    ValueKind,
)
from .base import HttpApiClient

logger = logging.getLogger(__name__)

# Classes whose members never belong to an interface
_ROOT_CLASSES: frozenset[Any] = frozenset(
    {object, typing.Protocol, typing.Generic, abc.ABC}
)

DEFAULT_EXCLUDED: tuple[type, ...] = (
    HttpApiClientProtocol,
    contextlib.AbstractContextManager,
    contextlib.AbstractAsyncContextManager,
)
"""Baseline capabilities whose members are never forwarded."""

_SCALAR_TYPES: tuple[type, ...] = (int, float, complex, bool, str, bytes)
_FUTURE_ORIGINS: tuple[Any, ...] = (
    collections.abc.Awaitable,
    collections.abc.Coroutine,
    asyncio.Future,
)
_UNION_TYPES: tuple[Any, ...] = (typing.Union, types.UnionType)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

# The client base always serves these itself
_CLIENT_CLASSES: tuple[type, ...] = (HttpApiClientProtocol, HttpApiClient)
_CLIENT_MEMBER_NAMES: frozenset[str] = frozenset(
    name for name in dir(HttpApiClient) if not name.startswith("_")
)


def collect(
    interface: type,
    excluded: Iterable[type] = DEFAULT_EXCLUDED,
) -> InterfaceDescriptor:
    """
    Collect the dispatchable members of ``interface``.

    Args:
        interface: The interface class, typically a Protocol or ABC
        excluded: Baseline capabilities whose members are left out

    Returns:
        The interface's descriptor table, members in dispatch order

    Raises:
        ConfigurationError: If interface is not a class, a member shares a
            name with the client base, or a member has its own type
            parameters, variadic parameters or no ``self``
    """
    if not inspect.isclass(interface):
        raise ConfigurationError(f"Expected an interface class, got {interface!r}")

    skipped = set(_ROOT_CLASSES)
    excluded_names: set[str] = set()
    # Only capabilities the interface derives from remove redeclared names
    for capability in (*excluded, *_CLIENT_CLASSES):
        if capability not in interface.__mro__:
            continue
        for klass in capability.__mro__:
            if klass in _ROOT_CLASSES:
                continue
            skipped.add(klass)
            excluded_names.update(name for name in vars(klass) if not name.startswith("_"))

    bound_type_vars: set[Any] = set()
    for klass in interface.__mro__:
        bound_type_vars.update(getattr(klass, "__parameters__", ()))

    seen: set[str] = set()
    members: list[MemberDescriptor] = []
    for klass in interface.__mro__:
        if klass in skipped:
            continue
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in seen:
                continue
            if not inspect.isfunction(attr):
                continue
            seen.add(name)
            if name in excluded_names:
                continue
            if name in _CLIENT_MEMBER_NAMES:
                raise ConfigurationError(
                    f"{klass.__qualname__}.{name} collides with the client member "
                    f"'{name}' and would never be forwarded",
                    interface=interface,
                    member=name,
                )
            members.append(
                _describe(interface, klass, name, attr, len(members), bound_type_vars)
            )

    logger.debug(
        f"Collected {len(members)} members of {interface.__qualname__}: "
        f"{[m.name for m in members]}"
    )
    return InterfaceDescriptor(interface=interface, members=tuple(members))


def _describe(
    interface: type,
    owner: type,
    name: str,
    function: Callable[..., Any],
    index: int,
    bound_type_vars: set[Any],
) -> MemberDescriptor:
    if getattr(function, "__type_params__", ()):
        raise ConfigurationError(
            f"{owner.__qualname__}.{name} declares type parameters and cannot be dispatched",
            interface=interface,
            member=name,
        )

    hints = _type_hints(function)
    for hint_name, hint in hints.items():
        if _type_vars(hint) - bound_type_vars:
            raise ConfigurationError(
                f"{owner.__qualname__}.{name} is generic over '{hint_name}' and cannot be dispatched",
                interface=interface,
                member=name,
            )

    params = list(inspect.signature(function).parameters.values())
    if not params or params[0].kind in _VARIADIC or params[0].kind is inspect.Parameter.KEYWORD_ONLY:
        raise ConfigurationError(
            f"{owner.__qualname__}.{name} must be an instance method",
            interface=interface,
            member=name,
        )

    parameters = []
    for position, param in enumerate(params[1:]):
        if param.kind in _VARIADIC:
            raise ConfigurationError(
                f"{owner.__qualname__}.{name} has variadic parameter '{param.name}' "
                f"which cannot be forwarded by position",
                interface=interface,
                member=name,
            )
        annotation = hints.get(param.name, param.annotation)
        parameters.append(
            ParameterDescriptor(
                name=param.name,
                value_kind=_value_kind(annotation),
                position=position,
                annotation=annotation,
                default=param.default,
            )
        )

    result_kind, result_type = _result_shape(function, hints)
    return MemberDescriptor(
        name=name,
        parameters=tuple(parameters),
        result_kind=result_kind,
        index=index,
        function=function,
        owner=owner,
        result_type=result_type,
    )


def _type_hints(function: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(function)
    except (NameError, TypeError) as e:
        # Unresolvable forward references stay as strings
        logger.debug(f"Using raw annotations of {function.__qualname__}: {e}")
        return dict(getattr(function, "__annotations__", {}))


def _type_vars(hint: Any) -> set[Any]:
    if isinstance(hint, TypeVar):
        return {hint}
    found: set[Any] = set()
    for arg in typing.get_args(hint):
        if isinstance(arg, (list, tuple)):
            for item in arg:
                found |= _type_vars(item)
        else:
            found |= _type_vars(arg)
    return found


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) in _UNION_TYPES:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _value_kind(annotation: Any) -> ValueKind:
    hint = _unwrap_optional(annotation)
    if isinstance(hint, type) and typing.get_origin(hint) is None:
        if issubclass(hint, _SCALAR_TYPES) or issubclass(hint, Enum):
            return ValueKind.SCALAR
    return ValueKind.REFERENCE


def _result_shape(
    function: Callable[..., Any], hints: dict[str, Any]
) -> tuple[ResultKind, type | None]:
    if inspect.iscoroutinefunction(function):
        return ResultKind.FUTURE, None

    hint = hints.get("return", inspect.Parameter.empty)
    if hint is None or hint is type(None) or hint == "None":
        return ResultKind.VOID, None
    if hint is inspect.Parameter.empty:
        return ResultKind.VALUE, None

    origin = typing.get_origin(hint) or hint
    if origin in _FUTURE_ORIGINS:
        return ResultKind.FUTURE, None

    if (
        isinstance(hint, type)
        and typing.get_origin(hint) is None
        and hint is not object
        and not getattr(hint, "_is_protocol", False)
    ):
        return ResultKind.VALUE, hint
    return ResultKind.VALUE, None


__all__ = ["DEFAULT_EXCLUDED", "collect"]
