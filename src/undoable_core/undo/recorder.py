"""ChangeRecorder — turns observed change events into history entries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..domain.events import ChangeKind
from ..ports.data_object import ICachedDataObject
from .caching import CachingCommand
from .command import DataObjectCommand
from .recording import RecordingPolicy, get_recording_policy, is_recording_suppressed

if TYPE_CHECKING:
    from ..domain.events import ChangeEvent
    from ..ports.data_object import IDataObject
    from .manager import UndoManager

logger = logging.getLogger("undoable_core.recording")


class ChangeRecorder:
    """Creates a command for every recordable change and adds it to a manager.

    Attach the recorder to the data objects whose changes should become
    undoable, either with ``watch()`` or by registering it as a change
    listener directly. A change is skipped when:

    * it happens inside ``suppress_recording()`` (an undo / redo being
      applied, or a bulk operation),
    * it is a derived-property change,
    * the active ``RecordingPolicy`` excludes its category.

    The active policy is the one of the innermost ``recording_policy()``
    scope, or the recorder's own policy outside such a scope.

    Usage::

        manager = UndoManager()
        recorder = ChangeRecorder(manager)
        recorder.watch(person)
        person.set("name", "Ada")  # recorded
    """

    def __init__(
        self, manager: UndoManager, policy: RecordingPolicy | None = None
    ) -> None:
        self._manager = manager
        self._policy = policy or RecordingPolicy()

    @property
    def manager(self) -> UndoManager:
        return self._manager

    @property
    def policy(self) -> RecordingPolicy:
        return self._policy

    def watch(self, obj: IDataObject) -> None:
        obj.add_change_listener(self)

    def unwatch(self, obj: IDataObject) -> None:
        obj.remove_change_listener(self)

    def __call__(self, event: ChangeEvent) -> None:
        self.record(event)

    def should_record(self, event: ChangeEvent) -> bool:
        if is_recording_suppressed():
            return False

        kind = event.kind
        if kind is ChangeKind.DERIVED:
            return False

        policy = get_recording_policy() or self._policy
        if kind is ChangeKind.QUALIFIER and not policy.record_qualifiers:
            return False
        return not (kind is ChangeKind.CACHED and not policy.record_cached)

    def record(self, event: ChangeEvent) -> bool:
        """Create and add a command for *event*.

        Returns:
            True if a command was created and added to the manager.
        """
        if not self.should_record(event):
            return False

        source = event.source
        if isinstance(source, ICachedDataObject) and source.cache_scope is not None:
            command: DataObjectCommand = CachingCommand(event)
        else:
            command = DataObjectCommand(event)

        logger.debug("Recording %r", command)
        self._manager.add(command)
        return True
