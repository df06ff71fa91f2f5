"""DataObjectCommand — an undoable built from a single ``ChangeEvent``."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from ..domain.events import ChangeKind
from ..ports.data_object import IUndoOverride
from ..primitives.exceptions import UndoArgumentError, UnknownChangeKindError
from .base import AbstractUndoable
from .recording import suppress_recording

if TYPE_CHECKING:
    from ..domain.events import ChangeEvent
    from ..ports.data_object import IDataObject
    from ..ports.undoable import IUndoable

logger = logging.getLogger("undoable_core.command")

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|[_\-\s]+")


def humanize_key(key: str) -> str:
    """``'firstName'`` / ``'first_name'`` -> ``'first name'``."""
    return " ".join(part.lower() for part in _WORD_BOUNDARY.split(key) if part)


class DataObjectCommand(AbstractUndoable):
    """Represents one change that happened in a data object.

    Undo applies the inverse of the recorded change, redo applies it again.
    The data object may customize both by implementing ``IUndoOverride``.
    The mutation runs inside ``suppress_recording()`` so that the change
    events it causes are not recorded as new history.

    Usage::

        command = DataObjectCommand(event)
        manager.add(command)
    """

    def __init__(self, event: ChangeEvent, *, significant: bool = True) -> None:
        if event.kind is ChangeKind.DERIVED:
            raise UndoArgumentError(
                f"Derived property changes are not undoable: {event.key!r}"
            )
        super().__init__()
        self._data_object: IDataObject = event.source
        self._key = event.key
        self._kind = event.kind
        self._relevant_value = event.relevant_value
        # rewritten by combine()
        self._new_value = event.new_value
        self._significant = significant

    # ── Recorded change ──────────────────────────────────────────

    @property
    def data_object(self) -> IDataObject:
        return self._data_object

    @property
    def key(self) -> str:
        return self._key

    @property
    def kind(self) -> ChangeKind:
        return self._kind

    @property
    def relevant_value(self) -> Any:
        return self._relevant_value

    @property
    def new_value(self) -> Any:
        return self._new_value

    def is_significant(self) -> bool:
        return self._significant

    @property
    def name(self) -> str:
        if self._kind is ChangeKind.QUALIFIER:
            return "Filter change"
        return f"Edit {humanize_key(self._key)}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key={self._key!r}, kind={self._kind.value}, "
            f"relevant_value={self._relevant_value!r}, new_value={self._new_value!r})"
        )

    # ── Undo / redo ──────────────────────────────────────────────

    def _undo(self) -> None:
        with suppress_recording():
            target = self._data_object
            if isinstance(target, IUndoOverride) and target.undo_change(self):
                return
            self._apply_inverse()

    def _redo(self) -> None:
        with suppress_recording():
            target = self._data_object
            if isinstance(target, IUndoOverride) and target.redo_change(self):
                return
            self._apply_forward()

    def _apply_inverse(self) -> None:
        target, key, kind = self._data_object, self._key, self._kind

        if kind.is_directly_settable:
            target.set(key, self._relevant_value)
        elif kind is ChangeKind.TO_ONE:
            if self._relevant_value is None:
                target.unrelate(key, self._new_value)
            else:
                target.relate(key, self._relevant_value)
        elif kind is ChangeKind.TO_MANY_ADD:
            target.unrelate(key, self._relevant_value)
        elif kind is ChangeKind.TO_MANY_REMOVE:
            target.relate(key, self._relevant_value)
        elif kind is ChangeKind.TO_MANY_REPLACE:
            for peer in list(self._new_value or ()):
                target.unrelate(key, peer)
            for peer in list(self._relevant_value or ()):
                target.relate(key, peer)
        else:
            raise UnknownChangeKindError(kind)

    def _apply_forward(self) -> None:
        target, key, kind = self._data_object, self._key, self._kind

        if kind.is_directly_settable:
            target.set(key, self._new_value)
        elif kind is ChangeKind.TO_ONE:
            if self._new_value is None:
                target.unrelate(key, self._relevant_value)
            else:
                target.relate(key, self._new_value)
        elif kind is ChangeKind.TO_MANY_ADD:
            target.relate(key, self._relevant_value)
        elif kind is ChangeKind.TO_MANY_REMOVE:
            target.unrelate(key, self._relevant_value)
        elif kind is ChangeKind.TO_MANY_REPLACE:
            for peer in list(self._relevant_value or ()):
                target.unrelate(key, peer)
            for peer in list(self._new_value or ()):
                target.relate(key, peer)
        else:
            raise UnknownChangeKindError(kind)

    # ── Combination ──────────────────────────────────────────────

    def _combine(self, other: IUndoable) -> IUndoable | None:
        """Merge a command for the same change, or the inverse side of it.

        * Two directly settable changes of the same kind, object and key
          become this command, keeping the oldest prior value and adopting
          the newest value.
        * Two relationship changes that are the two sides of one
          relationship become the to-one side (or this command if both are
          to-many). Replacements never combine, their inverse side is
          updated without events of its own.

        Anything else returns *None*.
        """
        if not isinstance(other, DataObjectCommand) or other.is_disposed:
            return None

        if self._kind is other._kind and self._kind.is_directly_settable:
            if other._key != self._key or other._data_object is not self._data_object:
                return None
            self._new_value = other._new_value
            logger.debug("Combined %r into %r", other, self)
            return self

        if ChangeKind.TO_MANY_REPLACE in (self._kind, other._kind):
            return None

        if self._kind.is_relationship and other._kind.is_relationship:
            if not self._is_inverse_side(other):
                return None
            return other if other._kind is ChangeKind.TO_ONE else self

        return None

    def _is_inverse_side(self, other: DataObjectCommand) -> bool:
        data_type = self._data_object.data_type
        inverse = data_type.inverse_relationship(self._key)
        if inverse is None or inverse != other._key:
            return False
        if data_type.data_type_for_relationship(self._key) != other._data_object.data_type:
            return False
        return self._involves(other._data_object) and other._involves(self._data_object)

    def _involves(self, peer: Any) -> bool:
        """True if *peer* is one of the objects this relationship change touched."""
        if self._kind is ChangeKind.TO_ONE:
            return peer is self._relevant_value or peer is self._new_value
        return peer is self._relevant_value

    def _dispose(self) -> None:
        self._relevant_value = None
        self._new_value = None
