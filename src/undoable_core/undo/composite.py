"""CompositeCommand — several changes undone and redone as one unit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..domain.events import ChangeEvent, ChangeKind, UndoEventType
from ..primitives.exceptions import UndoArgumentError
from .base import AbstractUndoable
from .command import DataObjectCommand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..domain.events import UndoEvent
    from ..ports.undoable import IUndoable

logger = logging.getLogger("undoable_core.composite")


class CompositeCommand(AbstractUndoable):
    """Aggregates an ordered sequence of undoables into a single one.

    Parts are expected in the order in which the changes occurred: undo runs
    them in reverse (the last change is undone first), redo runs them in
    recording order. ``inverse()`` flips that ordering permanently.

    While parts are folded in, each one is offered to the previous part's
    ``combine()``, so a burst of edits to one property collapses to a single
    child. ``ChangeEvent`` parts are wrapped in ``DataObjectCommand``s;
    derived-change events are skipped.

    Usage::

        composite = CompositeCommand([event_1, event_2, event_3])
        manager.add(composite)
    """

    def __init__(self, parts: Iterable[ChangeEvent | IUndoable]) -> None:
        super().__init__()
        self._children: list[IUndoable] = []
        for part in parts:
            if isinstance(part, ChangeEvent):
                if part.kind is ChangeKind.DERIVED:
                    continue
                part = DataObjectCommand(part)
            self._append(part)

        if not self._children:
            raise UndoArgumentError("A CompositeCommand needs at least one change")

    def _append(self, undoable: IUndoable) -> None:
        if self._children:
            last = self._children[-1]
            combined = last.combine(undoable)
            if combined is not None:
                last.remove_listener(self._on_child_event)
                self._children.pop()
                if combined is not undoable:
                    undoable.dispose()
                if combined is not last:
                    last.dispose()
                undoable = combined

        self._children.append(undoable)
        undoable.add_listener(self._on_child_event)

    @property
    def children(self) -> tuple[IUndoable, ...]:
        return tuple(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(children={len(self._children)})"

    def inverse(self) -> CompositeCommand:
        """Reverse the order in which the children are undone / redone."""
        self._children.reverse()
        return self

    # ── State ────────────────────────────────────────────────────

    def can_undo(self) -> bool:
        if self._disposed:
            return False
        return all(child.can_undo() for child in self._children)

    def can_redo(self) -> bool:
        if self._disposed:
            return False
        return all(child.can_redo() for child in self._children)

    def is_significant(self) -> bool:
        if self._disposed or not self._children:
            return False
        return all(child.is_significant() for child in self._children)

    @property
    def name(self) -> str:
        if len(self._children) == 1:
            return self._children[0].name
        return f"{len(self._children)} changes"

    # ── Undo / redo ──────────────────────────────────────────────

    def _undo(self) -> None:
        for child in reversed(list(self._children)):
            child.undo()

    def _redo(self) -> None:
        for child in list(self._children):
            child.redo()

    def _combine(self, other: IUndoable) -> IUndoable | None:  # noqa: ARG002
        return None

    # ── Children lifecycle ───────────────────────────────────────

    def _on_child_event(self, event: UndoEvent) -> None:
        if event.event_type is UndoEventType.DISPOSED:
            child = event.undoable
            child.remove_listener(self._on_child_event)
            self._children = [c for c in self._children if c is not child]
            logger.debug("Child %r of %r was disposed", child, self)

            if not self._children:
                self.dispose()
            else:
                self._fire(UndoEventType.CHANGED)

        elif event.event_type is UndoEventType.CHANGED:
            self._fire(UndoEventType.CHANGED)

    def _dispose(self) -> None:
        for child in list(self._children):
            child.remove_listener(self._on_child_event)
            child.dispose()
