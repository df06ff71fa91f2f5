"""Change events emitted by data objects and lifecycle events of undoables."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChangeKind(str, Enum):
    """The category of mutation a ``ChangeEvent`` describes."""

    ATTRIBUTE = "attribute"
    TO_ONE = "to_one"
    TO_MANY_ADD = "to_many_add"
    TO_MANY_REMOVE = "to_many_remove"
    TO_MANY_REPLACE = "to_many_replace"
    DERIVED = "derived"
    CACHED = "cached"
    QUALIFIER = "qualifier"

    @property
    def is_directly_settable(self) -> bool:
        """True for kinds that are reversed by simply setting the old value."""
        return self in _DIRECTLY_SETTABLE

    @property
    def is_relationship(self) -> bool:
        """True for to-one and to-many relationship kinds."""
        return self in _RELATIONSHIP


_DIRECTLY_SETTABLE = frozenset(
    {ChangeKind.ATTRIBUTE, ChangeKind.CACHED, ChangeKind.QUALIFIER}
)
_RELATIONSHIP = frozenset(
    {
        ChangeKind.TO_ONE,
        ChangeKind.TO_MANY_ADD,
        ChangeKind.TO_MANY_REMOVE,
        ChangeKind.TO_MANY_REPLACE,
    }
)


class ChangeEvent(BaseModel):
    """Immutable record of one mutation of a data object.

    The meaning of ``relevant_value`` depends on ``kind``:

    * attribute, cached, qualifier, derived and to-one changes: the prior value
    * to-many add / remove: the peer object that was added or removed
    * to-many replace: the prior list of peers

    ``new_value`` is the value of the property right after the change.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: Any
    key: str = Field(min_length=1)
    kind: ChangeKind
    relevant_value: Any = None
    new_value: Any = None
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("source")
    @classmethod
    def _source_required(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("The source object is required to create a ChangeEvent")
        return value

    @classmethod
    def capture(
        cls,
        source: Any,
        key: str,
        kind: ChangeKind,
        relevant_value: Any = None,
    ) -> ChangeEvent:
        """Build an event, reading ``new_value`` from ``source.get(key)`` now."""
        return cls(
            source=source,
            key=key,
            kind=kind,
            relevant_value=_snapshot(relevant_value),
            new_value=_snapshot(source.get(key)),
        )


def _snapshot(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


class UndoEventType(str, Enum):
    """Lifecycle notifications fired by undoables and managers."""

    ADDED = "added"
    REMOVED = "removed"
    UNDID = "undid"
    REDID = "redid"
    DISPOSED = "disposed"
    CHANGED = "changed"
    CLEARED = "cleared"
    LIMIT_REDUCED = "limit_reduced"


class UndoEvent(BaseModel):
    """Fired by an undoable about itself, or by a manager about its queue.

    ``undoable`` is the subject of the event: the added / removed entry, the
    significant entry that was undone / redone, the entry whose composition
    changed, or ``None`` for ``CLEARED`` and ``LIMIT_REDUCED``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    event_type: UndoEventType
    source: Any
    undoable: Any = None
