"""AbstractUndoable — shared state machine and notification for undoables."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..domain.events import UndoEvent, UndoEventType
from ..primitives.exceptions import DisposedUndoableError, UndoStateError

if TYPE_CHECKING:
    from ..ports.undoable import IUndoable, UndoListener

logger = logging.getLogger("undoable_core.undoable")


class AbstractUndoable(ABC):
    """Starting point for implementing ``IUndoable``.

    Concrete subclasses only provide the actual work in ``_undo()`` and
    ``_redo()``. This class:

    * keeps the ``can_undo`` / ``can_redo`` flags (a new undoable is assumed
      to be applied already, so it can be undone but not redone),
    * refuses to undo / redo when the flags don't allow it,
    * fires ``UNDID`` / ``REDID`` after the work is done,
    * fires ``DISPOSED`` exactly once from ``dispose()``.
    """

    def __init__(self) -> None:
        self._can_undo = True
        self._can_redo = False
        self._disposed = False
        self._listeners: list[UndoListener] = []

    # ── State ────────────────────────────────────────────────────

    def can_undo(self) -> bool:
        return self._can_undo and not self._disposed

    def can_redo(self) -> bool:
        return self._can_redo and not self._disposed

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def is_significant(self) -> bool:
        """Undoables are significant unless a subclass says otherwise."""
        return True

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label for user feedback."""

    # ── Undo / redo ──────────────────────────────────────────────

    def undo(self) -> None:
        if self._disposed:
            raise DisposedUndoableError(self, "undo")
        if not self.can_undo():
            raise UndoStateError(f"Can not undo this undoable: {self!r}")

        self._can_undo = False
        self._can_redo = True
        self._undo()
        self._fire(UndoEventType.UNDID)

    def redo(self) -> None:
        if self._disposed:
            raise DisposedUndoableError(self, "redo")
        if not self.can_redo():
            raise UndoStateError(f"Can not redo this undoable: {self!r}")

        self._can_redo = False
        self._can_undo = True
        self._redo()
        self._fire(UndoEventType.REDID)

    @abstractmethod
    def _undo(self) -> None:
        """Bring the affected state back to where it was before the change."""

    @abstractmethod
    def _redo(self) -> None:
        """Re-apply the change after it has been undone."""

    # ── Combination ──────────────────────────────────────────────

    def combine(self, other: IUndoable) -> IUndoable | None:
        if self._disposed:
            raise DisposedUndoableError(self, "combine")
        return self._combine(other)

    def _combine(self, other: IUndoable) -> IUndoable | None:  # noqa: ARG002
        return None

    # ── Disposal ─────────────────────────────────────────────────

    def dispose(self) -> None:
        if self._disposed:
            return
        self._dispose()
        self._disposed = True
        self._can_undo = False
        self._can_redo = False
        logger.debug("Disposed %s", self)
        self._fire(UndoEventType.DISPOSED)

    def _dispose(self) -> None:
        """Override to release resources held by the undoable."""

    # ── Listeners ────────────────────────────────────────────────

    def add_listener(self, listener: UndoListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: UndoListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _fire(self, event_type: UndoEventType) -> None:
        if not self._listeners:
            return
        event = UndoEvent(event_type=event_type, source=self, undoable=self)
        for listener in list(self._listeners):
            listener(event)
