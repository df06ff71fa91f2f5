"""Shared fixtures for undoable-core tests."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from undoable_core.adapters.memory import InMemoryDataObject, InMemoryDataType
from undoable_core.domain.events import UndoEvent
from undoable_core.undo import ChangeRecorder, UndoManager


@dataclass
class Schema:
    """Person / Team / Tag types wired with inverse relationships."""

    person: InMemoryDataType
    team: InMemoryDataType
    tag: InMemoryDataType
    filter: InMemoryDataType


@pytest.fixture
def schema() -> Schema:
    person = InMemoryDataType("Person").attribute("name", "age", "first_name")
    team = InMemoryDataType("Team").attribute("title")
    tag = InMemoryDataType("Tag").attribute("label")
    person.to_one("team", team, inverse="members")
    person.to_many("tags", tag, inverse="people")
    person.derived(
        "display_name", lambda obj: str(obj.get("name") or "").upper(), ["name"]
    )
    team.to_many("members", person, inverse="team")
    tag.to_many("people", person, inverse="tags")
    qualifier = InMemoryDataType("Filter").attribute("term")
    return Schema(person=person, team=team, tag=tag, filter=qualifier)


@pytest.fixture
def person(schema: Schema) -> InMemoryDataObject:
    return InMemoryDataObject(schema.person, name="A", age=30)


@pytest.fixture
def team(schema: Schema) -> InMemoryDataObject:
    return InMemoryDataObject(schema.team, title="Red")


@pytest.fixture
def manager() -> UndoManager:
    """Fresh undo manager with the default limit."""
    return UndoManager()


@pytest.fixture
def recorder(manager: UndoManager) -> ChangeRecorder:
    """Recorder adding to ``manager``; tests watch the objects they need."""
    return ChangeRecorder(manager)


@pytest.fixture
def undo_log(manager: UndoManager) -> list[UndoEvent]:
    """Every event ``manager`` fires, in order."""
    events: list[UndoEvent] = []
    manager.add_listener(events.append)
    return events
