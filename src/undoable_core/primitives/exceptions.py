"""Exceptions raised by the undo engine."""

from __future__ import annotations

from typing import Any


class UndoError(Exception):
    """Root exception for the entire undoable-core package."""


class UndoStateError(UndoError):
    """Raised when an operation is invoked in a state that does not allow it.

    Usage: ``UndoManager.undo()`` raises this when there is no significant
    entry to undo. Callers are expected to guard with ``next_undo()``.
    """


class DisposedUndoableError(UndoStateError):
    """Raised when a disposed undoable is asked to undo, redo or combine."""

    def __init__(self, undoable: Any, operation: str) -> None:
        self.undoable = undoable
        self.operation = operation
        super().__init__(f"Can not {operation} disposed undoable: {undoable!r}")


class ReentrantOperationError(UndoStateError):
    """Raised when a manager listener tries to mutate the manager it listens to."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"UndoManager.{operation}() can not be called from within "
            "an undo event notification"
        )


class UndoArgumentError(UndoError, ValueError):
    """Raised when an undoable or manager is built from invalid arguments."""


class UnknownChangeKindError(UndoError):
    """Raised when a command is asked to apply a change kind it does not know.

    Indicates a malformed ``ChangeEvent`` producer.
    """

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown change kind: {kind!r}")
