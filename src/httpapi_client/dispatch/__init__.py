# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Dispatcher synthesis for interface classes.

Components:
- collect: Builds the ordered member table of an interface
- synthesize: Builds a dispatcher class forwarding every member
- DispatcherRegistry: Process-wide cache of tables and factories
- HttpApiClient: Base class of all dispatchers
"""

from .base import HttpApiClient
from .collector import DEFAULT_EXCLUDED, collect
from .registry import DispatcherRegistry, OnceCache, get_registry, reset_registry
from .synthesizer import DispatcherFactory, synthesize

__all__ = [
    "DEFAULT_EXCLUDED",
    "DispatcherFactory",
    "DispatcherRegistry",
    "HttpApiClient",
    "OnceCache",
    "collect",
    "get_registry",
    "reset_registry",
    "synthesize",
]
