"""IUndoable — the contract every entry of an undo history fulfils."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.events import UndoEvent


class UndoListener(Protocol):
    """Callable notified with every ``UndoEvent``."""

    def __call__(self, event: UndoEvent) -> None:
        ...


@runtime_checkable
class IUndoable(Protocol):
    """
    Port for a reversible unit of change.

    After ``dispose()`` both ``can_undo()`` and ``can_redo()`` return *False*
    and further ``undo()`` / ``redo()`` calls raise. ``dispose()`` fires a
    ``DISPOSED`` event exactly once, synchronously.
    """

    def can_undo(self) -> bool:
        ...

    def can_redo(self) -> bool:
        ...

    def undo(self) -> None:
        ...

    def redo(self) -> None:
        ...

    def dispose(self) -> None:
        ...

    def combine(self, other: IUndoable) -> IUndoable | None:
        """Merge *other* (added after this one) into a single undoable.

        May return ``self``, ``other`` or a new undoable; *None* means the two
        can not be combined.
        """
        ...

    def is_significant(self) -> bool:
        """Significant undoables are the stopping points of undo / redo."""
        ...

    @property
    def name(self) -> str:
        """Short label for user feedback, at most four words."""
        ...

    def add_listener(self, listener: UndoListener) -> None:
        ...

    def remove_listener(self, listener: UndoListener) -> None:
        ...
