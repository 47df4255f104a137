"""Data models and enumerations for the command palette.

This module defines:
    - Enumerations for categories and command types
    - Dataclasses for commands, search results and palette state
    - command_from_dict for building commands from plain data
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from cmdpalette.core.exceptions import ValidationError

# =============================================================================
# ENUMERATIONS
# =============================================================================


class Category(str, Enum):
    """Fixed result categories.

    Command.category also accepts any other label; unknown labels are
    grouped after the fixed ones.
    """

    APPS = "Apps"
    FILES = "Files"
    FOLDERS = "Folders"
    COMMANDS = "Commands"
    SETTINGS = "Settings"
    ACTIONS = "Actions"
    URLS = "URLs"
    CALCULATIONS = "Calculations"
    RECENT = "Recent"


class CommandType(str, Enum):
    """Command type tag. Used by renderers only."""

    APP = "APP"
    FILE = "FILE"
    FOLDER = "FOLDER"
    ACTION = "ACTION"
    SETTING = "SETTING"
    URL = "URL"
    CALCULATION = "CALCULATION"


def category_label(category: Union[Category, str]) -> str:
    """Plain string label for a category value."""
    if isinstance(category, Category):
        return category.value
    return str(category)


def _noop() -> None:
    pass


# =============================================================================
# DATACLASSES
# =============================================================================


@dataclass
class Command:
    """A registered, invokable action with display metadata.

    Attributes:
        id: Unique within a registry
        title: Display string, primary match field
        category: A Category or any extension label
        action: Zero-argument callable, may return an awaitable
        type: Rendering tag
        subtitle: Secondary match field
        keywords: Additional match fields, lowest weight
        shortcut: Shortcut hint for display (e.g. "Cmd+N")
        priority: Higher is more prominent
        disabled: Disabled commands never appear in results
        data: Free-form extension data
    """

    id: str
    title: str
    category: Union[Category, str]
    action: Callable[[], Any] = _noop
    type: Union[CommandType, str] = CommandType.ACTION
    subtitle: Optional[str] = None
    keywords: list[str] = field(default_factory=list)
    shortcut: Optional[str] = None
    priority: float = 0
    disabled: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def category_label(self) -> str:
        return category_label(self.category)

    def with_category(self, category: Union[Category, str]) -> "Command":
        """Copy of this command filed under another category."""
        return replace(self, category=category)


@dataclass
class SearchResult:
    """A command with its relevance score.

    matches holds indices into the title only, and is empty when the
    subtitle or a keyword produced the winning score.
    """

    command: Command
    score: float  # 0..1, higher is better
    matches: list[int] = field(default_factory=list)


@dataclass
class CategoryGroup:
    """Results sharing one category, score-descending."""

    category: str
    results: list[SearchResult] = field(default_factory=list)


@dataclass
class SearchResults:
    """Grouped results plus the optional calculator value.

    When arithmetic_result is set it occupies flattened index 0 and every
    command result shifts down by one.
    """

    groups: list[CategoryGroup] = field(default_factory=list)
    arithmetic_result: Optional[str] = None

    def flatten(self) -> list[SearchResult]:
        """All command results in display order."""
        flat: list[SearchResult] = []
        for group in self.groups:
            flat.extend(group.results)
        return flat

    @property
    def total_count(self) -> int:
        """Navigable rows, counting the calculator row."""
        return len(self.flatten()) + (1 if self.arithmetic_result is not None else 0)

    def result_at(self, index: int) -> Optional[SearchResult]:
        """Command result at a navigation index, None for the calculator row."""
        if self.arithmetic_result is not None:
            index -= 1
        flat = self.flatten()
        if 0 <= index < len(flat):
            return flat[index]
        return None


@dataclass
class PaletteState:
    """Interaction state of one palette.

    selected_index is valid for the current results while open; query
    and selected_index go back to defaults whenever the palette closes.
    """

    is_open: bool = False
    query: str = ""
    selected_index: int = 0
    recent_ids: list[str] = field(default_factory=list)


# =============================================================================
# BUILDERS
# =============================================================================


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Command field {key!r} must be a string")
    return value


def command_from_dict(
    data: Mapping[str, Any],
    action: Optional[Callable[[], Any]] = None,
) -> Command:
    """Build a Command from a plain mapping such as a decoded JSON object.

    Args:
        data: Mapping with at least id, title and category
        action: Action to attach; defaults to a no-op

    Returns:
        The built Command

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    for key in ("id", "title"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Command field {key!r} is required")

    category = data.get("category", Category.COMMANDS.value)
    if not isinstance(category, str) or not category:
        raise ValidationError("Command field 'category' must be a non-empty string")
    try:
        category = Category(category)
    except ValueError:
        pass  # extension category

    keywords = data.get("keywords") or []
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        raise ValidationError("Command field 'keywords' must be a list of strings")

    priority = data.get("priority", 0)
    if isinstance(priority, bool) or not isinstance(priority, (int, float)):
        raise ValidationError("Command field 'priority' must be a number")

    type_tag = data.get("type", CommandType.ACTION.value)
    try:
        type_tag = CommandType(type_tag)
    except ValueError:
        pass

    extra = data.get("data") or {}
    if not isinstance(extra, dict):
        raise ValidationError("Command field 'data' must be an object")

    return Command(
        id=data["id"],
        title=data["title"],
        category=category,
        action=action or _noop,
        type=type_tag,
        subtitle=_optional_str(data, "subtitle"),
        keywords=list(keywords),
        shortcut=_optional_str(data, "shortcut"),
        priority=priority,
        disabled=bool(data.get("disabled", False)),
        data=dict(extra),
    )
