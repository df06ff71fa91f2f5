"""InMemoryDataType / InMemoryDataObject — dict-backed domain objects.

A small but complete producer of ``ChangeEvent``s: attributes, to-one and
to-many relationships with inverse maintenance, derived properties, qualifier
holders and cached (edit-buffer) objects. Used by the test-suite and as a
reference for adapting real domain models to ``IDataObject``.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...domain.events import ChangeEvent, ChangeKind
from ...ports.data_object import PropertyType

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from ...ports.data_object import ChangeListener, ICacheScope


@dataclass(frozen=True)
class _Property:
    key: str
    prop_type: PropertyType
    target: InMemoryDataType | None = None
    inverse: str | None = None
    derive: Callable[[InMemoryDataObject], Any] | None = None
    depends_on: tuple[str, ...] = ()


class InMemoryDataType:
    """In-memory implementation of ``IDataType``, built fluently.

    Usage::

        team = InMemoryDataType("Team").attribute("title")
        person = InMemoryDataType("Person").attribute("name")
        person.to_one("team", team, inverse="members")
        team.to_many("members", person, inverse="team")
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._properties: dict[str, _Property] = {}

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"InMemoryDataType({self._name!r})"

    # ── Declaration ──────────────────────────────────────────────

    def attribute(self, *keys: str) -> InMemoryDataType:
        for key in keys:
            self._properties[key] = _Property(key, PropertyType.ATTRIBUTE)
        return self

    def to_one(
        self, key: str, target: InMemoryDataType, inverse: str | None = None
    ) -> InMemoryDataType:
        self._properties[key] = _Property(key, PropertyType.TO_ONE, target, inverse)
        return self

    def to_many(
        self, key: str, target: InMemoryDataType, inverse: str | None = None
    ) -> InMemoryDataType:
        self._properties[key] = _Property(key, PropertyType.TO_MANY, target, inverse)
        return self

    def derived(
        self,
        key: str,
        derive: Callable[[InMemoryDataObject], Any],
        depends_on: Iterable[str],
    ) -> InMemoryDataType:
        self._properties[key] = _Property(
            key, PropertyType.DERIVED, derive=derive, depends_on=tuple(depends_on)
        )
        return self

    # ── IDataType ────────────────────────────────────────────────

    def properties(self) -> list[str]:
        return list(self._properties)

    def property_type(self, key: str) -> PropertyType:
        prop = self._properties.get(key)
        return prop.prop_type if prop is not None else PropertyType.UNDEFINED

    def inverse_relationship(self, key: str) -> str | None:
        prop = self._properties.get(key)
        return prop.inverse if prop is not None else None

    def data_type_for_relationship(self, key: str) -> InMemoryDataType | None:
        prop = self._properties.get(key)
        return prop.target if prop is not None else None

    def derived_from(self, key: str) -> list[str]:
        """Keys of the derived properties that depend on *key*."""
        return [
            prop.key
            for prop in self._properties.values()
            if prop.prop_type is PropertyType.DERIVED and key in prop.depends_on
        ]

    def _property(self, key: str) -> _Property:
        try:
            return self._properties[key]
        except KeyError:
            raise KeyError(f"{self._name} has no property {key!r}") from None


class InMemoryDataObject:
    """In-memory implementation of ``IDataObject``.

    Attribute changes fire ``ATTRIBUTE`` events, or ``QUALIFIER`` events for
    qualifier holders and ``CACHED`` events for objects living in a cache
    scope. Relating an object keeps the inverse side in sync and fires the
    events of both sides; assigning a whole to-many list fires a single
    ``TO_MANY_REPLACE`` event and updates the inverse side quietly, so it
    refuses peers whose to-one side points at another owner.
    """

    def __init__(
        self,
        data_type: InMemoryDataType,
        *,
        qualifier: bool = False,
        cache_scope: ICacheScope | None = None,
        **values: Any,
    ) -> None:
        self._data_type = data_type
        self._qualifier = qualifier
        self._cache_scope = cache_scope
        self._listeners: list[ChangeListener] = []
        self._values: dict[str, Any] = {}

        for key in data_type.properties():
            prop_type = data_type.property_type(key)
            if prop_type is PropertyType.TO_MANY:
                self._values[key] = []
            elif prop_type is not PropertyType.DERIVED:
                self._values[key] = None

        for key, value in values.items():
            if data_type.property_type(key) is not PropertyType.ATTRIBUTE:
                raise KeyError(f"{data_type.name} has no attribute {key!r}")
            self._values[key] = value

    @property
    def data_type(self) -> InMemoryDataType:
        return self._data_type

    @property
    def cache_scope(self) -> ICacheScope | None:
        return self._cache_scope

    def __repr__(self) -> str:
        return f"<{self._data_type.name} {id(self):#x}>"

    # ── Reading ──────────────────────────────────────────────────

    def get(self, key: str) -> Any:
        prop = self._data_type._property(key)
        if prop.prop_type is PropertyType.DERIVED:
            assert prop.derive is not None
            return prop.derive(self)
        if prop.prop_type is PropertyType.TO_MANY:
            return list(self._values[key])
        return self._values[key]

    # ── Writing ──────────────────────────────────────────────────

    def set(self, key: str, value: Any) -> None:
        prop_type = self._data_type._property(key).prop_type

        if prop_type is PropertyType.ATTRIBUTE:
            old = self._values[key]
            if old is value or old == value:
                return
            with self._tracking_derived(key):
                self._values[key] = value
                self._fire(key, self._attribute_kind, old)
        elif prop_type is PropertyType.TO_ONE:
            if value is None:
                self.unrelate(key, self._values[key])
            else:
                self.relate(key, value)
        elif prop_type is PropertyType.TO_MANY:
            self._replace(key, list(value or ()))
        else:
            raise KeyError(f"Derived property {key!r} can not be set")

    def relate(self, key: str, peer: Any) -> None:
        prop_type = self._data_type._property(key).prop_type
        if prop_type is PropertyType.TO_ONE:
            self._set_to_one(key, peer)
        elif prop_type is PropertyType.TO_MANY:
            self._add_to_many(key, peer)
        else:
            raise KeyError(f"{key!r} is not a relationship of {self._data_type.name}")

    def unrelate(self, key: str, peer: Any) -> None:
        prop_type = self._data_type._property(key).prop_type
        if prop_type is PropertyType.TO_ONE:
            if peer is not None and self._values[key] is peer:
                self._set_to_one(key, None)
        elif prop_type is PropertyType.TO_MANY:
            self._remove_to_many(key, peer)
        else:
            raise KeyError(f"{key!r} is not a relationship of {self._data_type.name}")

    @property
    def _attribute_kind(self) -> ChangeKind:
        if self._qualifier:
            return ChangeKind.QUALIFIER
        if self._cache_scope is not None:
            return ChangeKind.CACHED
        return ChangeKind.ATTRIBUTE

    def _set_to_one(self, key: str, peer: Any) -> None:
        old = self._values[key]
        if old is peer:
            return
        with self._tracking_derived(key):
            self._values[key] = peer
            self._fire(key, ChangeKind.TO_ONE, old)

        inverse = self._data_type.inverse_relationship(key)
        if inverse is not None:
            if old is not None:
                old._inverse_remove(inverse, self)
            if peer is not None:
                peer._inverse_add(inverse, self)

    def _add_to_many(self, key: str, peer: Any) -> None:
        if _contains(self._values[key], peer):
            return
        inverse = self._data_type.inverse_relationship(key)
        if inverse is not None and _is_to_one(peer, inverse):
            # the to-one side owns the relationship and calls back
            peer._set_to_one(inverse, self)
            return

        self._values[key].append(peer)
        self._fire(key, ChangeKind.TO_MANY_ADD, peer)
        if inverse is not None:
            peer._inverse_add(inverse, self)

    def _remove_to_many(self, key: str, peer: Any) -> None:
        if not _contains(self._values[key], peer):
            return
        inverse = self._data_type.inverse_relationship(key)
        if inverse is not None and _is_to_one(peer, inverse):
            peer._set_to_one(inverse, None)
            return

        _remove(self._values[key], peer)
        self._fire(key, ChangeKind.TO_MANY_REMOVE, peer)
        if inverse is not None:
            peer._inverse_remove(inverse, self)

    def _inverse_add(self, key: str, peer: Any) -> None:
        if self._data_type.property_type(key) is not PropertyType.TO_MANY:
            raise NotImplementedError(
                "One-to-one inverse relationships are not supported in memory"
            )
        if not _contains(self._values[key], peer):
            self._values[key].append(peer)
            self._fire(key, ChangeKind.TO_MANY_ADD, peer)

    def _inverse_remove(self, key: str, peer: Any) -> None:
        if self._data_type.property_type(key) is not PropertyType.TO_MANY:
            raise NotImplementedError(
                "One-to-one inverse relationships are not supported in memory"
            )
        if _contains(self._values[key], peer):
            _remove(self._values[key], peer)
            self._fire(key, ChangeKind.TO_MANY_REMOVE, peer)

    def _replace(self, key: str, peers: list[Any]) -> None:
        old = list(self._values[key])
        if len(old) == len(peers) and all(a is b for a, b in zip(old, peers)):
            return

        inverse = self._data_type.inverse_relationship(key)
        if inverse is not None:
            for peer in peers:
                owner = peer._values[inverse] if _is_to_one(peer, inverse) else None
                if owner is not None and owner is not self:
                    raise ValueError(
                        f"{peer!r} already belongs to {owner!r}; unrelate it first"
                    )

        self._values[key] = list(peers)
        if inverse is not None:
            for peer in old:
                if not _contains(peers, peer):
                    peer._quiet_detach(inverse, self)
            for peer in peers:
                if not _contains(old, peer):
                    peer._quiet_attach(inverse, self)
        self._fire(key, ChangeKind.TO_MANY_REPLACE, old)

    def _quiet_attach(self, key: str, owner: Any) -> None:
        if _is_to_one(self, key):
            self._values[key] = owner
        elif not _contains(self._values[key], owner):
            self._values[key].append(owner)

    def _quiet_detach(self, key: str, owner: Any) -> None:
        if _is_to_one(self, key):
            if self._values[key] is owner:
                self._values[key] = None
        else:
            _remove(self._values[key], owner)

    # ── Events ───────────────────────────────────────────────────

    def add_change_listener(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _fire(self, key: str, kind: ChangeKind, relevant_value: Any) -> None:
        if not self._listeners:
            return
        event = ChangeEvent.capture(self, key, kind, relevant_value)
        for listener in list(self._listeners):
            listener(event)

    @contextlib.contextmanager
    def _tracking_derived(self, key: str) -> Iterator[None]:
        dependents = self._data_type.derived_from(key)
        before = {derived: self.get(derived) for derived in dependents}
        yield
        for derived, old in before.items():
            if self.get(derived) != old:
                self._fire(derived, ChangeKind.DERIVED, old)


def _contains(items: list[Any], obj: Any) -> bool:
    return any(item is obj for item in items)


def _remove(items: list[Any], obj: Any) -> None:
    for index, item in enumerate(items):
        if item is obj:
            del items[index]
            return


def _is_to_one(obj: Any, key: str) -> bool:
    return obj.data_type.property_type(key) is PropertyType.TO_ONE
