"""CachingCommand — a command for objects living in a releasable edit cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..ports.data_object import ICachedDataObject
from ..primitives.exceptions import UndoArgumentError
from .command import DataObjectCommand

if TYPE_CHECKING:
    from ..domain.events import ChangeEvent
    from ..ports.data_object import ICacheScope

logger = logging.getLogger("undoable_core.command")


class CachingCommand(DataObjectCommand):
    """A ``DataObjectCommand`` whose object has a limited life span.

    Cached objects exist only while their ``ICacheScope`` holds them; once
    the cache is committed or released they are gone for all intents and
    purposes. The command listens to the scope and disposes itself at that
    point, which removes it from whichever manager or composite owns it.
    """

    def __init__(self, event: ChangeEvent, *, significant: bool = True) -> None:
        source = event.source
        scope = source.cache_scope if isinstance(source, ICachedDataObject) else None
        if scope is None:
            raise UndoArgumentError(
                f"CachingCommand requires an object with a cache scope, got {source!r}"
            )
        super().__init__(event, significant=significant)
        self._scope: ICacheScope = scope
        scope.add_scope_listener(self._on_scope_changed)

    @property
    def scope(self) -> ICacheScope:
        return self._scope

    def _on_scope_changed(self, scope: ICacheScope) -> None:
        if not scope.contains(self.data_object):
            logger.debug("Cached object left its scope, disposing %r", self)
            self.dispose()

    def _dispose(self) -> None:
        self._scope.remove_scope_listener(self._on_scope_changed)
        super()._dispose()
