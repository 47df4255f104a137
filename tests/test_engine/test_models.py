"""Tests for palette data models and command_from_dict."""

import pytest

from cmdpalette.core.exceptions import ValidationError
from cmdpalette.engine.models import (
    Category,
    Command,
    CommandType,
    SearchResults,
    command_from_dict,
)


class TestCommand:
    def test_defaults(self) -> None:
        command = Command(id="x", title="X", category=Category.APPS)
        assert command.priority == 0
        assert command.disabled is False
        assert command.keywords == []
        assert command.action() is None

    def test_category_label(self) -> None:
        assert Command(id="x", title="X", category=Category.URLS).category_label == "URLs"
        assert Command(id="x", title="X", category="Plugins").category_label == "Plugins"

    def test_with_category_copies(self) -> None:
        original = Command(id="x", title="X", category=Category.APPS)
        recent = original.with_category(Category.RECENT)
        assert recent.category_label == "Recent"
        assert original.category == Category.APPS
        assert recent.id == original.id


class TestSearchResults:
    def test_empty(self) -> None:
        results = SearchResults()
        assert results.flatten() == []
        assert results.total_count == 0
        assert results.result_at(0) is None


class TestCommandFromDict:
    def test_full_descriptor(self) -> None:
        calls: list[str] = []
        command = command_from_dict(
            {
                "id": "notes:new",
                "title": "New Note",
                "subtitle": "Create a new note",
                "category": "Actions",
                "type": "ACTION",
                "keywords": ["create", "add"],
                "shortcut": "Cmd+N",
                "priority": 2,
                "data": {"app": "notes"},
            },
            action=lambda: calls.append("ran"),
        )
        assert command.category is Category.ACTIONS
        assert command.type is CommandType.ACTION
        assert command.keywords == ["create", "add"]
        assert command.priority == 2
        assert command.data == {"app": "notes"}
        command.action()
        assert calls == ["ran"]

    def test_extension_category_kept_as_string(self) -> None:
        command = command_from_dict({"id": "p", "title": "P", "category": "Plugins"})
        assert command.category == "Plugins"

    def test_category_defaults_to_commands(self) -> None:
        assert command_from_dict({"id": "p", "title": "P"}).category is Category.COMMANDS

    @pytest.mark.parametrize(
        "data",
        [
            {"title": "No id"},
            {"id": "", "title": "Empty id"},
            {"id": "x"},
            {"id": "x", "title": "   "},
            {"id": "x", "title": "X", "keywords": "not-a-list"},
            {"id": "x", "title": "X", "keywords": [1, 2]},
            {"id": "x", "title": "X", "priority": "high"},
            {"id": "x", "title": "X", "priority": True},
            {"id": "x", "title": "X", "subtitle": 5},
            {"id": "x", "title": "X", "data": [1]},
        ],
    )
    def test_invalid_descriptors(self, data: dict) -> None:
        with pytest.raises(ValidationError):
            command_from_dict(data)
