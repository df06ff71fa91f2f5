"""Recording context — scoped switches that control automatic command creation.

Applying an undo or redo mutates data objects, which fire change events of
their own. Those must not be recorded as new history, so every apply runs
inside ``suppress_recording()``. The same scope is used by bulk operations
that produce a single aggregated command instead of one per field.

Both the suppression flag and the active ``RecordingPolicy`` live in
``ContextVar``s, so a scope never leaks into other threads or tasks and is
restored when the ``with`` block exits, even on error.
"""

from __future__ import annotations

import contextlib
from contextvars import ContextVar
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from collections.abc import Iterator


class RecordingPolicy(BaseModel):
    """Per-category switches for automatic command creation.

    ``record_qualifiers`` controls changes of objects holding filter
    (qualifier) values; ``record_cached`` controls changes of objects living
    in a deferred-edit cache.
    """

    model_config = ConfigDict(frozen=True)

    record_qualifiers: bool = True
    record_cached: bool = True


_recording_suppressed: ContextVar[bool] = ContextVar(
    "recording_suppressed", default=False
)
_recording_policy: ContextVar[RecordingPolicy | None] = ContextVar(
    "recording_policy", default=None
)


def is_recording_suppressed() -> bool:
    """True while inside a ``suppress_recording()`` scope."""
    return _recording_suppressed.get()


@contextlib.contextmanager
def suppress_recording(suppressed: bool = True) -> Iterator[None]:
    """Scope in which change events do not produce commands.

    Passing ``suppressed=False`` re-enables recording inside an outer
    suppressed scope.
    """
    token = _recording_suppressed.set(suppressed)
    try:
        yield
    finally:
        _recording_suppressed.reset(token)


def get_recording_policy() -> RecordingPolicy | None:
    """The policy set by the innermost ``recording_policy()`` scope, if any."""
    return _recording_policy.get()


@contextlib.contextmanager
def recording_policy(policy: RecordingPolicy) -> Iterator[RecordingPolicy]:
    """Scope in which *policy* overrides every recorder's own policy."""
    token = _recording_policy.set(policy)
    try:
        yield policy
    finally:
        _recording_policy.reset(token)
