"""Tests for the command registry - uniqueness, merge, scoping."""

import pytest

from cmdpalette.core.exceptions import ValidationError
from cmdpalette.engine.models import Category, Command
from cmdpalette.engine.registry import CommandRegistry


def _cmd(command_id: str, title: str = "", **kwargs) -> Command:
    return Command(id=command_id, title=title or command_id, category=Category.COMMANDS, **kwargs)


class TestRegister:
    def test_register_single(self) -> None:
        registry = CommandRegistry()
        registry.register(_cmd("a"))
        assert len(registry) == 1
        assert "a" in registry

    def test_reregister_replaces(self) -> None:
        registry = CommandRegistry()
        original = _cmd("a", "Original")
        replacement = _cmd("a", "Replacement")
        registry.register(original)
        registry.register(replacement)
        assert len(registry) == 1
        assert registry.get("a") is replacement

    def test_replace_keeps_position(self) -> None:
        registry = CommandRegistry([_cmd("a"), _cmd("b"), _cmd("c")])
        registry.register(_cmd("b", "B2"))
        assert [c.id for c in registry] == ["a", "b", "c"]
        assert registry.get("b").title == "B2"

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CommandRegistry().register(_cmd(""))


class TestUnregister:
    def test_unregister_present(self) -> None:
        registry = CommandRegistry([_cmd("a")])
        assert registry.unregister("a") is True
        assert len(registry) == 0

    def test_unregister_missing_is_noop(self) -> None:
        registry = CommandRegistry([_cmd("a")])
        revision = registry.revision
        assert registry.unregister("zzz") is False
        assert registry.revision == revision
        assert len(registry) == 1


class TestMergeAll:
    def test_merge_overlap_keeps_latest(self) -> None:
        registry = CommandRegistry()
        registry.register(_cmd("b", "stale"))
        registry.merge_all([_cmd("a"), _cmd("b", "fresh")])
        assert len(registry) == 2
        assert registry.get("b").title == "fresh"
        assert registry.get("a") is not None

    def test_merge_leaves_others_untouched(self) -> None:
        keep = _cmd("keep")
        registry = CommandRegistry([keep])
        registry.merge_all([_cmd("x"), _cmd("y")])
        assert registry.get("keep") is keep
        assert len(registry) == 3

    def test_invalid_batch_leaves_registry_unchanged(self) -> None:
        registry = CommandRegistry([_cmd("a")])
        with pytest.raises(ValidationError):
            registry.merge_all([_cmd("b"), _cmd("")])
        assert [c.id for c in registry] == ["a"]

    def test_revision_bumps_on_mutation(self) -> None:
        registry = CommandRegistry()
        start = registry.revision
        registry.register(_cmd("a"))
        registry.merge_all([_cmd("b")])
        registry.unregister("a")
        assert registry.revision == start + 3


class TestSnapshot:
    def test_snapshot_is_immutable_copy(self) -> None:
        registry = CommandRegistry([_cmd("a")])
        snapshot = registry.snapshot()
        registry.register(_cmd("b"))
        assert [c.id for c in snapshot] == ["a"]

    def test_clear(self) -> None:
        registry = CommandRegistry([_cmd("a"), _cmd("b")])
        registry.clear()
        assert len(registry) == 0


class TestScoped:
    def test_scoped_unregisters_on_exit(self) -> None:
        registry = CommandRegistry([_cmd("base")])
        with registry.scoped([_cmd("temp1"), _cmd("temp2")]):
            assert "temp1" in registry
            assert len(registry) == 3
        assert [c.id for c in registry] == ["base"]

    def test_scoped_unregisters_after_error(self) -> None:
        registry = CommandRegistry()
        with pytest.raises(RuntimeError):
            with registry.scoped([_cmd("temp")]):
                raise RuntimeError("component crashed")
        assert "temp" not in registry
