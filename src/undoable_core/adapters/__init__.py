"""Adapters — concrete implementations of the data-object ports."""

from __future__ import annotations

from .memory import InMemoryCacheScope, InMemoryDataObject, InMemoryDataType

__all__ = [
    "InMemoryCacheScope",
    "InMemoryDataObject",
    "InMemoryDataType",
]
