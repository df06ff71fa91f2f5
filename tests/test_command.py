"""Tests for DataObjectCommand: apply logic, combination and overrides."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from undoable_core.adapters.memory import InMemoryCacheScope, InMemoryDataObject
from undoable_core.domain.events import ChangeEvent, ChangeKind
from undoable_core.primitives.exceptions import (
    DisposedUndoableError,
    UndoArgumentError,
    UnknownChangeKindError,
)
from undoable_core.undo import (
    CompositeCommand,
    DataObjectCommand,
    humanize_key,
    is_recording_suppressed,
)


def capture(obj: InMemoryDataObject, mutate: Callable[[], None]) -> list[ChangeEvent]:
    """Run *mutate* and return the change events *obj* fired meanwhile."""
    events: list[ChangeEvent] = []
    obj.add_change_listener(events.append)
    try:
        mutate()
    finally:
        obj.remove_change_listener(events.append)
    return events


def command_for(obj: InMemoryDataObject, mutate: Callable[[], None]) -> DataObjectCommand:
    """Command for the first change *obj* fires while running *mutate*."""
    return DataObjectCommand(capture(obj, mutate)[0])


# ============================================================================
# Test Objects
# ============================================================================


class OverridingObject(InMemoryDataObject):
    """Data object that takes over undo / redo when ``handles`` is set."""

    def __init__(self, *args: Any, handles: bool, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.handles = handles
        self.calls: list[tuple[str, str]] = []

    def undo_change(self, command: Any) -> bool:
        self.calls.append(("undo", command.key))
        return self.handles

    def redo_change(self, command: Any) -> bool:
        self.calls.append(("redo", command.key))
        return self.handles


class _BogusKind:
    """Stands in for a change kind no command knows how to apply."""

    value = "bogus"
    is_directly_settable = False
    is_relationship = False


# ============================================================================
# Tests: Naming
# ============================================================================


class TestNaming:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("name", "name"),
            ("first_name", "first name"),
            ("firstName", "first name"),
            ("zip-code", "zip code"),
        ],
    )
    def test_humanize_key(self, key: str, expected: str) -> None:
        assert humanize_key(key) == expected

    def test_command_name(self, person: InMemoryDataObject) -> None:
        command = command_for(person, lambda: person.set("first_name", "Ada"))

        assert command.name == "Edit first name"

    def test_qualifier_command_name(self, schema: Any) -> None:
        term = InMemoryDataObject(schema.filter, qualifier=True)
        command = command_for(term, lambda: term.set("term", "abc"))

        assert command.kind is ChangeKind.QUALIFIER
        assert command.name == "Filter change"


# ============================================================================
# Tests: Construction
# ============================================================================


class TestConstruction:
    def test_copies_the_event(self, person: InMemoryDataObject) -> None:
        command = command_for(person, lambda: person.set("name", "B"))

        assert command.data_object is person
        assert command.key == "name"
        assert command.kind is ChangeKind.ATTRIBUTE
        assert command.relevant_value == "A"
        assert command.new_value == "B"
        assert command.is_significant()

    def test_insignificant_flag(self, person: InMemoryDataObject) -> None:
        event = capture(person, lambda: person.set("age", 31))[0]

        assert not DataObjectCommand(event, significant=False).is_significant()

    def test_derived_change_is_rejected(self, person: InMemoryDataObject) -> None:
        """Derived changes follow from other changes and are never commands."""
        events = capture(person, lambda: person.set("name", "B"))
        derived = [e for e in events if e.kind is ChangeKind.DERIVED]

        assert len(derived) == 1
        with pytest.raises(UndoArgumentError):
            DataObjectCommand(derived[0])


# ============================================================================
# Tests: Undo / redo per change kind
# ============================================================================


class TestApply:
    """Each change kind is reversed and re-applied."""

    def test_attribute(self, person: InMemoryDataObject) -> None:
        command = command_for(person, lambda: person.set("name", "B"))

        command.undo()
        assert person.get("name") == "A"
        command.redo()
        assert person.get("name") == "B"

    def test_to_one_from_nothing(
        self, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        command = command_for(person, lambda: person.relate("team", team))

        command.undo()
        assert person.get("team") is None
        assert team.get("members") == []

        command.redo()
        assert person.get("team") is team
        assert team.get("members") == [person]

    def test_to_one_switch(
        self, schema: Any, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        other = InMemoryDataObject(schema.team, title="Blue")
        person.relate("team", team)
        command = command_for(person, lambda: person.relate("team", other))

        command.undo()
        assert person.get("team") is team
        assert other.get("members") == []

        command.redo()
        assert person.get("team") is other
        assert team.get("members") == []

    def test_to_one_cleared(
        self, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        person.relate("team", team)
        command = command_for(person, lambda: person.set("team", None))

        command.undo()
        assert person.get("team") is team
        command.redo()
        assert person.get("team") is None

    def test_to_many_add(
        self, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        command = command_for(team, lambda: team.relate("members", person))

        assert command.kind is ChangeKind.TO_MANY_ADD
        command.undo()
        assert team.get("members") == []
        assert person.get("team") is None

        command.redo()
        assert team.get("members") == [person]

    def test_to_many_remove(self, schema: Any, person: InMemoryDataObject) -> None:
        tag = InMemoryDataObject(schema.tag, label="x")
        person.relate("tags", tag)
        command = command_for(person, lambda: person.unrelate("tags", tag))

        assert command.kind is ChangeKind.TO_MANY_REMOVE
        command.undo()
        assert person.get("tags") == [tag]
        assert tag.get("people") == [person]

        command.redo()
        assert person.get("tags") == []
        assert tag.get("people") == []

    def test_to_many_replace(self, schema: Any, team: InMemoryDataObject) -> None:
        first = InMemoryDataObject(schema.person, name="first")
        second = InMemoryDataObject(schema.person, name="second")
        team.relate("members", first)
        command = command_for(team, lambda: team.set("members", [second]))

        assert command.kind is ChangeKind.TO_MANY_REPLACE
        command.undo()
        assert team.get("members") == [first]
        assert first.get("team") is team
        assert second.get("team") is None

        command.redo()
        assert team.get("members") == [second]
        assert first.get("team") is None
        assert second.get("team") is team

    def test_cached(self, schema: Any) -> None:
        cached = InMemoryCacheScope().create(schema.person, name="A")
        command = command_for(cached, lambda: cached.set("name", "B"))

        assert command.kind is ChangeKind.CACHED
        command.undo()
        assert cached.get("name") == "A"

    def test_apply_suppresses_recording(self, person: InMemoryDataObject) -> None:
        """Changes caused by undo / redo are made with recording suppressed."""
        command = command_for(person, lambda: person.set("name", "B"))
        seen: list[bool] = []
        person.add_change_listener(lambda event: seen.append(is_recording_suppressed()))

        command.undo()
        command.redo()

        assert seen
        assert all(seen)
        assert not is_recording_suppressed()

    def test_unknown_kind_is_fatal(self, person: InMemoryDataObject) -> None:
        event = ChangeEvent.model_construct(
            source=person, key="name", kind=_BogusKind(), relevant_value="A"
        )
        command = DataObjectCommand(event)

        with pytest.raises(UnknownChangeKindError):
            command.undo()


# ============================================================================
# Tests: Override capability
# ============================================================================


class TestUndoOverride:
    def test_handled_override_skips_default(self, schema: Any) -> None:
        obj = OverridingObject(schema.person, handles=True, name="A")
        command = command_for(obj, lambda: obj.set("name", "B"))

        command.undo()

        assert obj.calls == [("undo", "name")]
        assert obj.get("name") == "B"

    def test_declined_override_falls_back(self, schema: Any) -> None:
        obj = OverridingObject(schema.person, handles=False, name="A")
        command = command_for(obj, lambda: obj.set("name", "B"))

        command.undo()
        command.redo()

        assert obj.calls == [("undo", "name"), ("redo", "name")]
        assert obj.get("name") == "B"


# ============================================================================
# Tests: Combination
# ============================================================================


class TestCombine:
    """Combination is conservative: any mismatch means no combination."""

    def test_same_key_keeps_oldest_and_newest(self, person: InMemoryDataObject) -> None:
        first = command_for(person, lambda: person.set("name", "B"))
        second = command_for(person, lambda: person.set("name", "C"))

        assert first.combine(second) is first
        assert first.relevant_value == "A"
        assert first.new_value == "C"

        first.undo()
        assert person.get("name") == "A"
        first.redo()
        assert person.get("name") == "C"

    def test_different_key(self, person: InMemoryDataObject) -> None:
        first = command_for(person, lambda: person.set("name", "B"))
        second = command_for(person, lambda: person.set("age", 1))

        assert first.combine(second) is None

    def test_different_object(self, schema: Any, person: InMemoryDataObject) -> None:
        other = InMemoryDataObject(schema.person, name="A")
        first = command_for(person, lambda: person.set("name", "B"))
        second = command_for(other, lambda: other.set("name", "B"))

        assert first.combine(second) is None

    def test_different_kind(self, schema: Any, person: InMemoryDataObject) -> None:
        first = command_for(person, lambda: person.set("name", "B"))
        cached = ChangeEvent(
            source=person, key="name", kind=ChangeKind.CACHED, relevant_value="B"
        )

        assert first.combine(DataObjectCommand(cached)) is None

    def test_disposed_other(self, person: InMemoryDataObject) -> None:
        first = command_for(person, lambda: person.set("name", "B"))
        second = command_for(person, lambda: person.set("name", "C"))
        second.dispose()

        assert first.combine(second) is None

    def test_disposed_self_raises(self, person: InMemoryDataObject) -> None:
        first = command_for(person, lambda: person.set("name", "B"))
        second = command_for(person, lambda: person.set("name", "C"))
        first.dispose()

        with pytest.raises(DisposedUndoableError):
            first.combine(second)

    def test_inverse_sides_collapse_to_to_one(
        self, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        """Both sides of one relationship change become the to-one command."""
        events: list[ChangeEvent] = []
        person.add_change_listener(events.append)
        team.add_change_listener(events.append)
        person.relate("team", team)

        to_one, to_many = (DataObjectCommand(e) for e in events)
        assert to_one.combine(to_many) is to_one
        assert to_many.combine(to_one) is to_one

    def test_unrelated_peers_do_not_collapse(
        self, schema: Any, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        """Same keys, but the two changes involve different objects."""
        other = InMemoryDataObject(schema.person, name="other")
        to_one = command_for(person, lambda: person.relate("team", team))
        to_many = command_for(team, lambda: team.relate("members", other))

        assert to_one.combine(to_many) is None

    def test_many_to_many_sides_collapse(
        self, schema: Any, person: InMemoryDataObject
    ) -> None:
        tag = InMemoryDataObject(schema.tag, label="x")
        events: list[ChangeEvent] = []
        person.add_change_listener(events.append)
        tag.add_change_listener(events.append)
        person.relate("tags", tag)

        mine, theirs = (DataObjectCommand(e) for e in events)
        assert mine.combine(theirs) is mine

    def test_replace_never_collapses(
        self, person: InMemoryDataObject, team: InMemoryDataObject
    ) -> None:
        to_one = command_for(person, lambda: person.relate("team", team))
        replace = command_for(team, lambda: team.set("members", []))

        assert to_one.combine(replace) is None

    def test_non_command(self, person: InMemoryDataObject) -> None:
        first = command_for(person, lambda: person.set("name", "B"))
        composite = CompositeCommand(capture(person, lambda: person.set("age", 2)))

        assert first.combine(composite) is None

    def test_dispose_releases_values(self, person: InMemoryDataObject) -> None:
        command = command_for(person, lambda: person.set("name", "B"))
        command.dispose()

        assert command.relevant_value is None
        assert command.new_value is None
