"""undoable-core — Undo/redo transaction engine for observable data objects.

Records property and relationship changes of data objects as reversible
commands, groups them into composites and drives them through a bounded,
significance-aware history. Only runtime dependency: pydantic.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import InMemoryCacheScope, InMemoryDataObject, InMemoryDataType

# ── Domain ───────────────────────────────────────────────────────
from .domain import ChangeEvent, ChangeKind, UndoEvent, UndoEventType

# ── Ports ────────────────────────────────────────────────────────
from .ports import (
    ChangeListener,
    ICachedDataObject,
    ICacheScope,
    IDataObject,
    IDataType,
    IUndoable,
    IUndoOverride,
    PropertyType,
    UndoListener,
)

# ── Primitives ───────────────────────────────────────────────────
from .primitives import (
    DisposedUndoableError,
    ReentrantOperationError,
    UndoArgumentError,
    UndoError,
    UndoStateError,
    UnknownChangeKindError,
)

# ── Undo engine ──────────────────────────────────────────────────
from .undo import (
    AbstractUndoable,
    CachingCommand,
    ChangeCollector,
    ChangeRecorder,
    CompositeCommand,
    DataObjectCommand,
    RecordingPolicy,
    UndoManager,
    batch_relate,
    copy_values,
    get_recording_policy,
    humanize_key,
    is_recording_suppressed,
    recording_policy,
    suppress_recording,
)

__all__ = [
    # Adapters
    "InMemoryCacheScope",
    "InMemoryDataObject",
    "InMemoryDataType",
    # Domain
    "ChangeEvent",
    "ChangeKind",
    "UndoEvent",
    "UndoEventType",
    # Ports
    "ChangeListener",
    "ICacheScope",
    "ICachedDataObject",
    "IDataObject",
    "IDataType",
    "IUndoOverride",
    "IUndoable",
    "PropertyType",
    "UndoListener",
    # Primitives
    "DisposedUndoableError",
    "ReentrantOperationError",
    "UndoArgumentError",
    "UndoError",
    "UndoStateError",
    "UnknownChangeKindError",
    # Undo engine
    "AbstractUndoable",
    "CachingCommand",
    "ChangeCollector",
    "ChangeRecorder",
    "CompositeCommand",
    "DataObjectCommand",
    "RecordingPolicy",
    "UndoManager",
    "batch_relate",
    "copy_values",
    "get_recording_policy",
    "humanize_key",
    "is_recording_suppressed",
    "recording_policy",
    "suppress_recording",
]
