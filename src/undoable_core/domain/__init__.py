"""Domain primitives: change events and undo lifecycle events."""

from __future__ import annotations

from .events import ChangeEvent, ChangeKind, UndoEvent, UndoEventType

__all__: list[str] = [
    "ChangeEvent",
    "ChangeKind",
    "UndoEvent",
    "UndoEventType",
]
