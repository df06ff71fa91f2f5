"""Tests for CompositeCommand and ChangeCollector."""

from __future__ import annotations

from typing import Any

import pytest

from undoable_core.adapters.memory import InMemoryDataObject
from undoable_core.domain.events import ChangeEvent, ChangeKind, UndoEvent, UndoEventType
from undoable_core.primitives.exceptions import UndoArgumentError
from undoable_core.undo import (
    AbstractUndoable,
    ChangeCollector,
    CompositeCommand,
    DataObjectCommand,
)

# ============================================================================
# Test Undoables
# ============================================================================


class LoggingUndoable(AbstractUndoable):
    """Writes its undo / redo calls into a shared log."""

    def __init__(self, label: str, log: list[str], *, significant: bool = True) -> None:
        super().__init__()
        self.label = label
        self.log = log
        self._significant = significant

    @property
    def name(self) -> str:
        return f"Step {self.label}"

    def is_significant(self) -> bool:
        return self._significant

    def _undo(self) -> None:
        self.log.append(f"undo {self.label}")

    def _redo(self) -> None:
        self.log.append(f"redo {self.label}")


# ============================================================================
# Tests: CompositeCommand
# ============================================================================


class TestCompositeConstruction:
    def test_empty_is_rejected(self) -> None:
        with pytest.raises(UndoArgumentError):
            CompositeCommand([])

    def test_only_derived_events_is_rejected(self, person: InMemoryDataObject) -> None:
        derived = ChangeEvent(source=person, key="display_name", kind=ChangeKind.DERIVED)

        with pytest.raises(UndoArgumentError):
            CompositeCommand([derived])

    def test_events_are_folded_with_combine(self, person: InMemoryDataObject) -> None:
        """A burst of edits to one property collapses into one child."""
        with ChangeCollector(person) as collector:
            person.set("name", "B")
            person.set("name", "C")
            person.set("age", 5)
            events = list(collector.pending)

        composite = CompositeCommand(events)

        assert len(composite) == 2
        first = composite.children[0]
        assert isinstance(first, DataObjectCommand)
        assert (first.relevant_value, first.new_value) == ("A", "C")

    def test_combined_away_children_are_disposed(self, person: InMemoryDataObject) -> None:
        first = DataObjectCommand(
            ChangeEvent(source=person, key="name", kind=ChangeKind.ATTRIBUTE, new_value="B")
        )
        second = DataObjectCommand(
            ChangeEvent(source=person, key="name", kind=ChangeKind.ATTRIBUTE, new_value="C")
        )

        composite = CompositeCommand([first, second])

        assert composite.children == (first,)
        assert second.is_disposed
        assert not first.is_disposed


class TestCompositeUndoRedo:
    def test_undo_runs_backwards_and_redo_forwards(self) -> None:
        log: list[str] = []
        composite = CompositeCommand(
            [LoggingUndoable("a", log), LoggingUndoable("b", log), LoggingUndoable("c", log)]
        )

        composite.undo()
        composite.redo()

        assert log == ["undo c", "undo b", "undo a", "redo a", "redo b", "redo c"]

    def test_inverse_flips_the_order(self) -> None:
        log: list[str] = []
        composite = CompositeCommand(
            [LoggingUndoable("a", log), LoggingUndoable("b", log)]
        ).inverse()

        composite.undo()

        assert log == ["undo a", "undo b"]

    def test_restores_several_objects(
        self, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        with ChangeCollector(person, team) as collector:
            person.set("name", "B")
            team.set("title", "Blue")
            person.relate("team", team)
            composite = collector.materialize()

        assert composite is not None
        composite.undo()
        assert person.get("name") == "A"
        assert team.get("title") == "Red"
        assert person.get("team") is None
        assert team.get("members") == []

        composite.redo()
        assert person.get("name") == "B"
        assert team.get("members") == [person]


class TestCompositeState:
    def test_name_of_single_child(self) -> None:
        composite = CompositeCommand([LoggingUndoable("a", [])])

        assert composite.name == "Step a"

    def test_name_of_several_children(self) -> None:
        log: list[str] = []
        composite = CompositeCommand([LoggingUndoable(x, log) for x in "abc"])

        assert composite.name == "3 changes"

    def test_significance_is_the_and_of_children(self) -> None:
        log: list[str] = []
        significant = CompositeCommand([LoggingUndoable("a", log)])
        mixed = CompositeCommand(
            [LoggingUndoable("a", log), LoggingUndoable("b", log, significant=False)]
        )

        assert significant.is_significant()
        assert not mixed.is_significant()

    def test_can_undo_is_the_and_of_children(self) -> None:
        log: list[str] = []
        child = LoggingUndoable("a", log)
        composite = CompositeCommand([child, LoggingUndoable("b", log)])

        assert composite.can_undo()
        child.undo()
        assert not composite.can_undo()
        assert not composite.can_redo()


class TestCompositeChildren:
    """A composite tracks the disposal of its children."""

    def test_disposed_child_is_removed(self) -> None:
        log: list[str] = []
        a, b = LoggingUndoable("a", log), LoggingUndoable("b", log)
        composite = CompositeCommand([a, b])
        events: list[UndoEvent] = []
        composite.add_listener(events.append)

        a.dispose()

        assert composite.children == (b,)
        assert [e.event_type for e in events] == [UndoEventType.CHANGED]
        assert not composite.is_disposed

    def test_last_child_disposal_disposes_composite(self) -> None:
        child = LoggingUndoable("a", [])
        composite = CompositeCommand([child])
        events: list[UndoEvent] = []
        composite.add_listener(events.append)

        child.dispose()

        assert composite.is_disposed
        assert [e.event_type for e in events] == [UndoEventType.DISPOSED]
        assert not composite.is_significant()

    def test_dispose_disposes_children(self) -> None:
        log: list[str] = []
        a, b = LoggingUndoable("a", log), LoggingUndoable("b", log)
        composite = CompositeCommand([a, b])

        composite.dispose()

        assert a.is_disposed
        assert b.is_disposed
        assert not composite.can_undo()

    def test_nested_composite_change_is_forwarded(self) -> None:
        log: list[str] = []
        a, b = LoggingUndoable("a", log), LoggingUndoable("b", log)
        inner = CompositeCommand([a, b])
        outer = CompositeCommand([inner, LoggingUndoable("c", log)])
        events: list[UndoEvent] = []
        outer.add_listener(events.append)

        a.dispose()

        assert [e.event_type for e in events] == [UndoEventType.CHANGED]


# ============================================================================
# Tests: ChangeCollector
# ============================================================================


class TestChangeCollector:
    def test_buffers_changes_without_derived(self, person: InMemoryDataObject) -> None:
        collector = ChangeCollector(person)

        person.set("name", "B")

        assert [e.kind for e in collector.pending] == [ChangeKind.ATTRIBUTE]

    def test_materialize_clears_the_buffer(self, person: InMemoryDataObject) -> None:
        collector = ChangeCollector(person)
        person.set("name", "B")

        composite = collector.materialize()

        assert isinstance(composite, CompositeCommand)
        assert collector.pending == ()
        assert collector.materialize() is None

    def test_materialize_keeps_listening(self, person: InMemoryDataObject) -> None:
        """The caller owns the collector's registration."""
        collector = ChangeCollector(person)
        person.set("name", "B")
        collector.materialize()

        person.set("name", "C")

        assert len(collector.pending) == 1

    def test_watch_is_idempotent(self, person: InMemoryDataObject) -> None:
        collector = ChangeCollector(person)
        collector.watch(person)

        person.set("age", 1)

        assert len(collector.pending) == 1

    def test_unwatch(self, schema: Any, person: InMemoryDataObject) -> None:
        other = InMemoryDataObject(schema.person)
        collector = ChangeCollector(person, other)
        collector.unwatch(person)

        person.set("age", 1)
        other.set("age", 2)

        assert [e.source for e in collector.pending] == [other]

    def test_context_manager_unwatches(self, person: InMemoryDataObject) -> None:
        with ChangeCollector(person) as collector:
            person.set("age", 1)

        person.set("age", 2)

        assert len(collector.pending) == 1

    def test_clear_forgets_changes(self, person: InMemoryDataObject) -> None:
        collector = ChangeCollector(person)
        person.set("age", 1)

        collector.clear()

        assert collector.materialize() is None
