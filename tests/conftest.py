"""Shared pytest fixtures for cmdpalette tests.

Fixtures:
    - calls: List collecting executed command ids
    - sample_commands: A small, mixed-category command set
    - registry: CommandRegistry holding sample_commands
    - memory_store: In-memory recent-command store
    - recency: RecencyCache over memory_store
    - controller: PaletteController over registry and recency
    - palette_config: Configuration pointing at tmp_path
"""

from pathlib import Path

import pytest

from cmdpalette.core.config import PaletteConfig, reset_config
from cmdpalette.engine.models import Category, Command, CommandType
from cmdpalette.engine.recency import MemoryRecentStore, RecencyCache
from cmdpalette.engine.registry import CommandRegistry
from cmdpalette.gui.controller import PaletteController


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def sample_commands(calls: list[str]) -> list[Command]:
    """Commands across several categories, registered in this order."""

    def record(command_id: str):
        return lambda: calls.append(command_id)

    return [
        Command(
            id="notes:new",
            title="New Note",
            subtitle="Create a new note",
            category=Category.ACTIONS,
            type=CommandType.ACTION,
            keywords=["create", "add", "note"],
            shortcut="Cmd+N",
            action=record("notes:new"),
        ),
        Command(
            id="settings:open",
            title="Open Settings",
            category=Category.SETTINGS,
            type=CommandType.SETTING,
            keywords=["preferences", "config"],
            action=record("settings:open"),
        ),
        Command(
            id="app:terminal",
            title="Terminal",
            category=Category.APPS,
            type=CommandType.APP,
            action=record("app:terminal"),
        ),
        Command(
            id="app:calculator",
            title="Calculator",
            category=Category.APPS,
            type=CommandType.APP,
            priority=1,
            action=record("app:calculator"),
        ),
        Command(
            id="system:sleep",
            title="Sleep",
            category=Category.ACTIONS,
            disabled=True,
            action=record("system:sleep"),
        ),
    ]


@pytest.fixture
def registry(sample_commands: list[Command]) -> CommandRegistry:
    return CommandRegistry(sample_commands)


@pytest.fixture
def memory_store() -> MemoryRecentStore:
    return MemoryRecentStore()


@pytest.fixture
def recency(memory_store: MemoryRecentStore) -> RecencyCache:
    return RecencyCache(memory_store, max_items=10)


@pytest.fixture
def controller(registry: CommandRegistry, recency: RecencyCache) -> PaletteController:
    return PaletteController(registry, recency)


@pytest.fixture
def palette_config(tmp_path: Path) -> PaletteConfig:
    """Configuration with all paths under tmp_path."""
    return PaletteConfig(
        recent_path=tmp_path / "recent.json",
        log_path=tmp_path / "logs",
    )


@pytest.fixture(autouse=True)
def _reset_config_singleton():
    reset_config()
    yield
    reset_config()


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
