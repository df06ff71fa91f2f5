"""Undo/Redo engine — reversible commands and the history that drives them."""

from .base import AbstractUndoable
from .caching import CachingCommand
from .collector import ChangeCollector
from .command import DataObjectCommand, humanize_key
from .composite import CompositeCommand
from .manager import UndoManager
from .recorder import ChangeRecorder
from .recording import (
    RecordingPolicy,
    get_recording_policy,
    is_recording_suppressed,
    recording_policy,
    suppress_recording,
)
from .util import batch_relate, copy_values

__all__ = [
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
