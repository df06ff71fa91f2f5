"""Primitives: exceptions."""

from __future__ import annotations

from .exceptions import (
    DisposedUndoableError,
    ReentrantOperationError,
    UndoArgumentError,
    UndoError,
    UndoStateError,
    UnknownChangeKindError,
)

__all__ = [
    "DisposedUndoableError",
    "ReentrantOperationError",
    "UndoArgumentError",
    "UndoError",
    "UndoStateError",
    "UnknownChangeKindError",
]
