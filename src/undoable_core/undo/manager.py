"""UndoManager — the ordered command history with a current pointer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..domain.events import UndoEvent, UndoEventType
from ..primitives.exceptions import (
    ReentrantOperationError,
    UndoArgumentError,
    UndoStateError,
)

if TYPE_CHECKING:
    from ..ports.undoable import IUndoable, UndoListener

logger = logging.getLogger("undoable_core.manager")


class UndoManager:
    """Collects undoables and performs undo / redo on that collection.

    The queue holds undoables in the order they were added. ``current``
    points at the last applied entry: entries ``0..current`` can be undone,
    entries after ``current`` were undone and can be redone. ``current`` is
    ``-1`` when nothing can be undone.

    Significance drives traversal: ``undo()`` and ``redo()`` always stop
    right after a significant entry, taking along every insignificant entry
    on the way. ``limit`` bounds the number of significant entries; the
    oldest are evicted when it is exceeded.

    One manager is meant to be owned by an editing context (application,
    session, document) and handed to whoever records or queries history.
    It is not thread-safe; listeners are notified synchronously in
    registration order and must not call mutating methods of the manager.

    Usage::

        manager = UndoManager(limit=50)
        manager.add(command)
        if manager.next_undo() is not None:
            manager.undo()
    """

    DEFAULT_LIMIT = 30

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        _check_limit(limit)
        self._queue: list[IUndoable] = []
        self._current = -1
        self._limit = limit
        self._listeners: list[UndoListener] = []
        self._notifying = 0

    # ── Introspection ────────────────────────────────────────────

    @property
    def entries(self) -> tuple[IUndoable, ...]:
        return tuple(self._queue)

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def significant_count(self) -> int:
        return sum(1 for u in self._queue if u.is_significant())

    def __len__(self) -> int:
        return len(self._queue)

    def next_undo(self) -> IUndoable | None:
        """The significant entry the next ``undo()`` would stop at, or *None*.

        Does not modify the queue.
        """
        for index in range(self._current, -1, -1):
            if self._queue[index].is_significant():
                return self._queue[index]
        return None

    def next_redo(self) -> IUndoable | None:
        """The significant entry the next ``redo()`` would stop at, or *None*.

        Does not modify the queue.
        """
        for index in range(self._current + 1, len(self._queue)):
            if self._queue[index].is_significant():
                return self._queue[index]
        return None

    def can_undo(self) -> bool:
        return self.next_undo() is not None

    def can_redo(self) -> bool:
        return self.next_redo() is not None

    @property
    def undo_name(self) -> str | None:
        """Name of the entry the next ``undo()`` would stop at."""
        entry = self.next_undo()
        return entry.name if entry is not None else None

    @property
    def redo_name(self) -> str | None:
        """Name of the entry the next ``redo()`` would stop at."""
        entry = self.next_redo()
        return entry.name if entry is not None else None

    # ── Recording ────────────────────────────────────────────────

    def add(self, undoable: IUndoable) -> None:
        """Append *undoable* to the history.

        * Entries waiting to be redone are disposed, new history replaces
          them.
        * The last entry is offered ``combine(undoable)``; a successful
          combination replaces the tail and disposes whichever of the two
          originals was not kept.
        * If the significant entries now exceed ``limit``, the oldest
          significant entry is evicted with all insignificant ones before it.
        """
        self._check_reentry("add")
        self._discard(self._current + 1, len(self._queue))

        if self._queue:
            last = self._queue[-1]
            combined = last.combine(undoable)
            if combined is not None:
                last.remove_listener(self._on_undoable_event)
                self._queue[-1] = combined
                if combined is not undoable:
                    undoable.dispose()
                if combined is not last:
                    last.dispose()
                logger.debug("Combined %r with the last history entry", undoable)
                undoable = combined
            else:
                self._queue.append(undoable)
        else:
            self._queue.append(undoable)

        if undoable.is_significant() and self.significant_count > self._limit:
            evicted = self._evict(1)
            logger.debug("History limit %d reached, evicted %d entries", self._limit, evicted)

        self._current = len(self._queue) - 1
        undoable.add_listener(self._on_undoable_event)
        logger.debug("Added %r (queue size=%d)", undoable, len(self._queue))
        self._fire(UndoEventType.ADDED, undoable)

    # ── Undo / redo ──────────────────────────────────────────────

    def undo(self) -> None:
        """Undo entries until a significant one has been undone.

        An entry that can not be redone after undoing is disposed together
        with everything after it. If no significant entry remains to be
        undone afterwards, the remaining insignificant entries are undone as
        well. Fires a single ``UNDID`` event naming the significant entry.

        Raises:
            UndoStateError: If there is no significant entry to undo.
        """
        self._undo_walk("undo", dispose_undone=False)

    def undo_and_dispose(self) -> None:
        """Same walk as ``undo()``, but every undone entry is disposed.

        Use when the undone changes must not be redoable.

        Raises:
            UndoStateError: If there is no significant entry to undo.
        """
        self._undo_walk("undo_and_dispose", dispose_undone=True)

    def _undo_walk(self, operation: str, *, dispose_undone: bool) -> None:
        self._check_reentry(operation)
        if self.next_undo() is None:
            raise UndoStateError("There is no significant undoable to undo in the queue")

        while True:
            undoable = self._undo_current(dispose_undone)
            if undoable.is_significant():
                break
        significant = undoable

        # only insignificant entries left, undo all of them
        if self.next_undo() is None:
            while self._current > -1:
                self._undo_current(dispose_undone)

        logger.debug("Undid %r (current=%d)", significant, self._current)
        self._fire(UndoEventType.UNDID, significant)

    def _undo_current(self, dispose_undone: bool) -> IUndoable:
        undoable = self._queue[self._current]
        undoable.undo()
        if dispose_undone or not undoable.can_redo():
            self._discard(self._current, len(self._queue))
        self._current -= 1
        return undoable

    def redo(self) -> None:
        """Redo entries until a significant one has been redone.

        An entry that can not be undone after redoing is disposed together
        with everything before it. If no significant entry remains to be
        redone afterwards, the remaining insignificant entries are redone as
        well. Fires a single ``REDID`` event naming the significant entry.

        Raises:
            UndoStateError: If there is no significant entry to redo.
        """
        self._check_reentry("redo")
        if self.next_redo() is None:
            raise UndoStateError("There is nothing to redo in the queue")

        while True:
            undoable = self._redo_next()
            if undoable.is_significant():
                break
        significant = undoable

        # only insignificant entries left, redo all of them
        if self.next_redo() is None:
            while self._current + 1 < len(self._queue):
                self._redo_next()

        logger.debug("Redid %r (current=%d)", significant, self._current)
        self._fire(UndoEventType.REDID, significant)

    def _redo_next(self) -> IUndoable:
        index = self._current + 1
        undoable = self._queue[index]
        undoable.redo()
        if not undoable.can_undo():
            self._discard(0, index + 1)
            self._current = -1
        else:
            self._current = index
        return undoable

    # ── Housekeeping ─────────────────────────────────────────────

    def clear(self) -> None:
        """Dispose every entry and empty the history."""
        self._check_reentry("clear")
        removed = self._discard(0, len(self._queue))
        self._current = -1
        logger.info("Undo history cleared (%d entries disposed)", removed)
        self._fire(UndoEventType.CLEARED, None)

    @property
    def limit(self) -> int:
        """Maximum number of significant entries kept in the history."""
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        self.set_limit(value)

    def set_limit(self, new_limit: int) -> None:
        """Change the limit, evicting the oldest entries if it was lowered."""
        self._check_reentry("set_limit")
        _check_limit(new_limit)

        old_limit = self._limit
        self._limit = new_limit
        if new_limit >= old_limit:
            return

        excess = self.significant_count - new_limit
        if excess <= 0:
            return

        removed = self._evict(excess)
        self._current = max(-1, self._current - removed)
        logger.info(
            "Undo limit reduced from %d to %d, evicted %d entries",
            old_limit,
            new_limit,
            removed,
        )
        self._fire(UndoEventType.LIMIT_REDUCED, None)

    def _evict(self, significant: int) -> int:
        """Drop the *significant* oldest significant entries and all before them."""
        seen = 0
        for index, undoable in enumerate(self._queue):
            if undoable.is_significant():
                seen += 1
                if seen == significant:
                    return self._discard(0, index + 1)
        return 0

    def _discard(self, start: int, end: int) -> int:
        """Dispose and remove ``queue[start:end]`` without ``REMOVED`` events."""
        doomed = self._queue[start:end]
        if not doomed:
            return 0
        del self._queue[start:end]
        for undoable in doomed:
            undoable.remove_listener(self._on_undoable_event)
            undoable.dispose()
        return len(doomed)

    # ── Events ───────────────────────────────────────────────────

    def add_listener(self, listener: UndoListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: UndoListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _fire(self, event_type: UndoEventType, undoable: IUndoable | None) -> None:
        if not self._listeners:
            return
        event = UndoEvent(event_type=event_type, source=self, undoable=undoable)
        self._notifying += 1
        try:
            for listener in list(self._listeners):
                listener(event)
        finally:
            self._notifying -= 1

    def _check_reentry(self, operation: str) -> None:
        if self._notifying:
            raise ReentrantOperationError(operation)

    def _on_undoable_event(self, event: UndoEvent) -> None:
        """Tracks entries disposed or changed by someone other than the manager."""
        undoable = event.undoable

        if event.event_type is UndoEventType.DISPOSED:
            index = next(
                (i for i, entry in enumerate(self._queue) if entry is undoable), -1
            )
            if index == -1:
                logger.warning("Disposed undoable %r is not in the queue", undoable)
                raise UndoStateError(f"Disposed undoable is not in the queue: {undoable!r}")

            if index <= self._current:
                self._current -= 1
            del self._queue[index]
            logger.debug("Removed externally disposed %r", undoable)
            self._fire(UndoEventType.REMOVED, undoable)

        elif event.event_type is UndoEventType.CHANGED:
            self._fire(UndoEventType.CHANGED, undoable)


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise UndoArgumentError(f"The undo limit must be at least 1, got {limit}")
