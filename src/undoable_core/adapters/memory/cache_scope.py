"""InMemoryCacheScope — list-backed edit buffer for cached data objects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .data_object import InMemoryDataObject

if TYPE_CHECKING:
    from collections.abc import Callable

    from .data_object import InMemoryDataType

logger = logging.getLogger("undoable_core.adapters.memory")


class InMemoryCacheScope:
    """In-memory implementation of ``ICacheScope``.

    Objects created through ``create()`` fire ``CACHED`` change events and
    stay in the scope until ``release()``. Scope listeners are notified
    whenever objects leave the scope.
    """

    def __init__(self) -> None:
        self._objects: list[InMemoryDataObject] = []
        self._listeners: list[Callable[[InMemoryCacheScope], None]] = []

    def create(self, data_type: InMemoryDataType, **values: Any) -> InMemoryDataObject:
        obj = InMemoryDataObject(data_type, cache_scope=self, **values)
        self._objects.append(obj)
        return obj

    def contains(self, obj: Any) -> bool:
        return any(held is obj for held in self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def release(self, obj: InMemoryDataObject | None = None) -> None:
        """Drop *obj* from the scope, or every object when *obj* is None."""
        if obj is None:
            released = len(self._objects)
            self._objects.clear()
        else:
            before = len(self._objects)
            self._objects = [held for held in self._objects if held is not obj]
            released = before - len(self._objects)

        if released:
            logger.debug("Released %d cached objects", released)
            for listener in list(self._listeners):
                listener(self)

    def add_scope_listener(self, listener: Callable[[InMemoryCacheScope], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_scope_listener(
        self, listener: Callable[[InMemoryCacheScope], None]
    ) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
