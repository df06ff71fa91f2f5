"""ChangeCollector — accumulates change events into a CompositeCommand."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..domain.events import ChangeKind
from .composite import CompositeCommand

if TYPE_CHECKING:
    from types import TracebackType

    from ..domain.events import ChangeEvent
    from ..ports.data_object import IDataObject

logger = logging.getLogger("undoable_core.collector")


class ChangeCollector:
    """Passive listener buffering every change of the objects it watches.

    Derived-property changes are ignored, they follow from other changes that
    are already buffered. ``materialize()`` turns the buffer into a single
    ``CompositeCommand`` and empties it, so the collector can be reused.

    The collector never unregisters itself on ``materialize()``; use
    ``unwatch()`` / ``unwatch_all()`` or the context manager form.

    Usage::

        with ChangeCollector(order, customer) as collector:
            order.set("status", "shipped")
            customer.set("balance", 0)
            manager.add(collector.materialize())
    """

    def __init__(self, *objects: IDataObject) -> None:
        self._events: list[ChangeEvent] = []
        self._watched: list[IDataObject] = []
        for obj in objects:
            self.watch(obj)

    def watch(self, obj: IDataObject) -> None:
        """Start collecting the changes of *obj*."""
        if any(obj is watched for watched in self._watched):
            return
        obj.add_change_listener(self)
        self._watched.append(obj)

    def unwatch(self, obj: IDataObject) -> None:
        """Stop collecting the changes of *obj*."""
        obj.remove_change_listener(self)
        self._watched = [watched for watched in self._watched if watched is not obj]

    def unwatch_all(self) -> None:
        for obj in list(self._watched):
            self.unwatch(obj)

    def __call__(self, event: ChangeEvent) -> None:
        if event.kind is not ChangeKind.DERIVED:
            self._events.append(event)

    @property
    def pending(self) -> tuple[ChangeEvent, ...]:
        """Events collected since the last ``materialize()``."""
        return tuple(self._events)

    def clear(self) -> None:
        """Forget the collected events without materializing them."""
        self._events.clear()

    def materialize(self) -> CompositeCommand | None:
        """Build a ``CompositeCommand`` of the buffered events and reset.

        Returns *None* if nothing was collected.
        """
        if not self._events:
            return None

        composite = CompositeCommand(self._events)
        logger.debug(
            "Materialized %d events into %r", len(self._events), composite
        )
        self._events.clear()
        return composite

    def __enter__(self) -> ChangeCollector:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unwatch_all()
