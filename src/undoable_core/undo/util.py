"""Bulk operations producing a single aggregated undoable."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from ..ports.data_object import PropertyType
from .collector import ChangeCollector
from .recording import suppress_recording

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..ports.data_object import IDataObject
    from .composite import CompositeCommand

logger = logging.getLogger("undoable_core.util")


def batch_relate(
    objects: Iterable[IDataObject], key: str, relate_to: IDataObject
) -> CompositeCommand | None:
    """Relate every object in *objects* to *relate_to* through *key*.

    *key* is the relationship name from the perspective of *objects*.
    Objects already related are skipped. No per-object commands are recorded;
    instead a single ``CompositeCommand`` covering the whole batch is
    returned (not added to any manager), or *None* if nothing changed.
    """
    collector = ChangeCollector()
    with suppress_recording():
        for obj in objects:
            if obj.get(key) is relate_to:
                continue
            collector.watch(obj)
            try:
                obj.relate(key, relate_to)
            finally:
                collector.unwatch(obj)

    composite = collector.materialize()
    logger.debug("batch_relate(%r) produced %r", key, composite)
    return composite


def copy_values(
    source: IDataObject, target: IDataObject, *, record: bool = False
) -> CompositeCommand | None:
    """Copy attribute and to-one values from *source* to *target*.

    Derived and undefined properties are skipped, as are to-many
    relationships (copying those would steal the peers from *source*).
    When *record* is false no per-property commands are recorded. Either
    way a single ``CompositeCommand`` for the whole copy is returned (not
    added to any manager), or *None* if nothing changed.
    """
    data_type = source.data_type
    recording = contextlib.nullcontext() if record else suppress_recording()
    with ChangeCollector(target) as collector, recording:
        for key in data_type.properties():
            prop_type = data_type.property_type(key)
            if prop_type is PropertyType.ATTRIBUTE:
                value = source.get(key)
                if target.get(key) != value:
                    target.set(key, value)
            elif prop_type is PropertyType.TO_ONE:
                _copy_to_one(source, target, key)

        return collector.materialize()


def _copy_to_one(source: IDataObject, target: IDataObject, key: str) -> None:
    value = source.get(key)
    current = target.get(key)
    if value is current:
        return
    if value is None:
        target.unrelate(key, current)
    else:
        target.relate(key, value)
