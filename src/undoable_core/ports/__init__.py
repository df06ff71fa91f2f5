"""Ports — protocol definitions the engine depends on."""

from __future__ import annotations

from .data_object import (
    ChangeListener,
    ICachedDataObject,
    ICacheScope,
    IDataObject,
    IDataType,
    IUndoOverride,
    PropertyType,
)
from .undoable import IUndoable, UndoListener

__all__ = [
    "ChangeListener",
    "ICacheScope",
    "ICachedDataObject",
    "IDataObject",
    "IDataType",
    "IUndoOverride",
    "IUndoable",
    "PropertyType",
    "UndoListener",
]
