"""IDataObject / IDataType — the domain-object layer the undo engine drives."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..domain.events import ChangeEvent


class PropertyType(str, Enum):
    """The kind of property a key names on a data type."""

    ATTRIBUTE = "attribute"
    TO_ONE = "to_one"
    TO_MANY = "to_many"
    DERIVED = "derived"
    UNDEFINED = "undefined"

    @property
    def is_derived(self) -> bool:
        return self is PropertyType.DERIVED


class ChangeListener(Protocol):
    """Callable notified with every ``ChangeEvent`` an object fires."""

    def __call__(self, event: ChangeEvent) -> None:
        ...


@runtime_checkable
class IDataType(Protocol):
    """Port describing the properties and relationships of a data object."""

    @property
    def name(self) -> str:
        """Name of the type (e.g. ``'Person'``)."""
        ...

    def properties(self) -> list[str]:
        """All property keys, in declaration order."""
        ...

    def property_type(self, key: str) -> PropertyType:
        """The ``PropertyType`` of *key*, ``UNDEFINED`` if unknown."""
        ...

    def inverse_relationship(self, key: str) -> str | None:
        """Key of the inverse relationship on the related type, or *None*."""
        ...

    def data_type_for_relationship(self, key: str) -> IDataType | None:
        """The data type on the other side of relationship *key*."""
        ...


@runtime_checkable
class IDataObject(Protocol):
    """
    Port for an object whose property mutations are tracked.

    Implementations fire a ``ChangeEvent`` to their change listeners for
    every mutation of a stored (or derived) property.
    """

    @property
    def data_type(self) -> IDataType:
        ...

    def get(self, key: str) -> Any:
        """Return the current value of *key*."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Set an attribute (or replace a relationship) value."""
        ...

    def relate(self, key: str, peer: Any) -> None:
        """Add *peer* to relationship *key* (or make it the to-one value)."""
        ...

    def unrelate(self, key: str, peer: Any) -> None:
        """Remove *peer* from relationship *key*."""
        ...

    def add_change_listener(self, listener: ChangeListener) -> None:
        ...

    def remove_change_listener(self, listener: ChangeListener) -> None:
        ...


@runtime_checkable
class IUndoOverride(Protocol):
    """
    Optional capability of a data object that customizes undo / redo.

    Both methods return *True* if they handled the action completely, and
    *False* if the standard inverse / forward action should still be applied.
    """

    def undo_change(self, command: Any) -> bool:
        ...

    def redo_change(self, command: Any) -> bool:
        ...


@runtime_checkable
class ICacheScope(Protocol):
    """A releasable container (edit buffer) holding cached data objects."""

    def contains(self, obj: Any) -> bool:
        """True while *obj* is still held by this scope."""
        ...

    def add_scope_listener(self, listener: Callable[[ICacheScope], None]) -> None:
        ...

    def remove_scope_listener(self, listener: Callable[[ICacheScope], None]) -> None:
        ...


@runtime_checkable
class ICachedDataObject(Protocol):
    """Capability of a data object that lives inside an ``ICacheScope``."""

    @property
    def cache_scope(self) -> ICacheScope | None:
        ...
