"""Command palette controller - open/close, query, selection, execution.

Owns PaletteState and turns key presses into transitions. Results are
recomputed from the registry whenever the query, the recent list or the
registry itself changes, and the selection is clamped to them.

Usage:
    palette = create_palette(commands=[...])
    palette.open()
    palette.set_query("new")
    palette.handle_key(KeyPress("Enter"))
"""

from typing import Any, Callable, Iterable, Optional, Union

from cmdpalette.core.config import PaletteConfig, get_config
from cmdpalette.core.exceptions import CommandExecutionError
from cmdpalette.core.logging import get_logger
from cmdpalette.core.tasks import DispatchHandle, dispatch_action
from cmdpalette.engine.models import Command, PaletteState, SearchResult, SearchResults
from cmdpalette.engine.recency import JsonFileRecentStore, RecencyCache
from cmdpalette.engine.registry import CommandRegistry
from cmdpalette.engine.search import recompute
from cmdpalette.gui.keys import (
    ARROW_DOWN,
    ARROW_UP,
    ENTER,
    ESCAPE,
    TAB,
    KeyPress,
    Shortcut,
)

logger = get_logger(__name__)

DEFAULT_SHORTCUT = Shortcut.parse("meta+k")
DEFAULT_ALT_SHORTCUT = Shortcut.parse("meta+space")

ErrorSink = Callable[[CommandExecutionError], None]


def _log_failure(error: CommandExecutionError) -> None:
    logger.error(
        "Command action failed",
        exc_info=error.__cause__ or error,
        extra={"context": {"command_id": error.command_id}},
    )


class PaletteController:
    """Interaction state machine for one palette.

    States:
        Closed: is_open False, query "", selected_index 0
        Open: is_open True

    The registry and recency cache are injected; one controller per
    palette lifetime.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        recency: RecencyCache,
        shortcut: Optional[Shortcut] = DEFAULT_SHORTCUT,
        alt_shortcut: Optional[Shortcut] = DEFAULT_ALT_SHORTCUT,
        on_command_execute: Optional[Callable[[Command], None]] = None,
        on_calculation_accept: Optional[Callable[[str], None]] = None,
        on_error: Optional[ErrorSink] = None,
    ):
        """Initialize controller.

        Args:
            registry: Commands to search
            recency: Recent-command cache, already loaded
            shortcut: Open/toggle chord
            alt_shortcut: Secondary open/toggle chord, None to disable
            on_command_execute: Called after each execution attempt
            on_calculation_accept: Receives the accepted calculator value
            on_error: Diagnostic sink for failed actions (default: log)
        """
        self._registry = registry
        self._recency = recency
        self._shortcuts = [s for s in (shortcut, alt_shortcut) if s is not None]
        self._on_command_execute = on_command_execute
        self._on_calculation_accept = on_calculation_accept
        self._on_error = on_error or _log_failure
        self._state = PaletteState(recent_ids=recency.ids())
        self._results: Optional[SearchResults] = None
        self._results_key: Optional[tuple[Any, ...]] = None

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> PaletteState:
        """Current state. Treat as read-only."""
        if self._state.is_open:
            self._refresh()
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def recency(self) -> RecencyCache:
        return self._recency

    @property
    def results(self) -> SearchResults:
        """Results for the current query, recomputed when stale."""
        return self._refresh()

    def selected(self) -> Optional[SearchResult]:
        """Command result under the cursor; None for the calculator row or no rows."""
        return self.results.result_at(self._state.selected_index)

    def _refresh(self) -> SearchResults:
        self._state.recent_ids = self._recency.ids()
        key = (self._state.query, tuple(self._state.recent_ids), self._registry.revision)
        if self._results is None or key != self._results_key:
            self._results = recompute(self._state, self._registry)
            self._results_key = key
            self._clamp_selection(self._results.total_count)
        return self._results

    def _clamp_selection(self, total: int) -> None:
        if total == 0 or self._state.selected_index < 0:
            self._state.selected_index = 0
        elif self._state.selected_index >= total:
            self._state.selected_index = total - 1

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open with an empty query and the first row selected."""
        self._state.is_open = True
        self._state.query = ""
        self._state.selected_index = 0
        logger.debug("Palette opened")

    def close(self) -> None:
        """Close and reset query and selection."""
        was_open = self._state.is_open
        self._state.is_open = False
        self._state.query = ""
        self._state.selected_index = 0
        if was_open:
            logger.debug("Palette closed")

    def toggle(self) -> None:
        if self._state.is_open:
            self.close()
        else:
            self.open()

    def set_query(self, query: str) -> None:
        """Replace the query. Selection returns to the first row."""
        self._state.query = query
        self._state.selected_index = 0

    def set_selected_index(self, index: int) -> None:
        """Move the cursor. Callers keep index within [0, total_count)."""
        self._state.selected_index = index

    def select_next(self) -> None:
        """Down/Tab: next row, wrapping to the top."""
        total = self.results.total_count
        if total == 0:
            return
        self._state.selected_index = (self._state.selected_index + 1) % total

    def select_previous(self) -> None:
        """Up/Shift+Tab: previous row, wrapping to the bottom."""
        total = self.results.total_count
        if total == 0:
            return
        self._state.selected_index = (self._state.selected_index - 1 + total) % total

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def confirm(self) -> bool:
        """Enter: accept the calculator row or execute the selected command.

        Returns:
            True if something was accepted or executed
        """
        results = self.results
        if results.arithmetic_result is not None and self._state.selected_index == 0:
            return self.accept_calculation()
        result = results.result_at(self._state.selected_index)
        if result is None:
            return False
        return self.execute_result(result)

    def accept_calculation(self) -> bool:
        """Hand the calculator value to the accept callback and close."""
        value = self.results.arithmetic_result
        if value is None:
            return False
        logger.debug("Calculation accepted", extra={"context": {"value": value}})
        self.close()
        if self._on_calculation_accept is not None:
            self._on_calculation_accept(value)
        return True

    def execute_result(self, result: SearchResult) -> bool:
        """Execute the command behind a result (keyboard or pointer)."""
        command = self._registry.get(result.command.id) or result.command
        return self.execute_command(command) is not False

    def execute_command(self, command: Command) -> Union[bool, DispatchHandle, None]:
        """Record, close, then run a command's action.

        The palette closes before the action runs, so a failing action
        never leaves it open. Failures go to the error sink.

        Returns:
            False for a disabled command, otherwise the dispatch handle
            for pending work (None when the action finished synchronously)
        """
        if command.disabled:
            logger.debug("Disabled command ignored", extra={"context": {"command_id": command.id}})
            return False

        self._recency.record_execution(command.id)
        self._state.recent_ids = self._recency.ids()
        self.close()

        logger.debug(
            "Palette command executed",
            extra={"context": {"command_id": command.id, "category": command.category_label}},
        )

        def report(exc: BaseException) -> None:
            error = CommandExecutionError(command.id, f"Command {command.id!r} failed: {exc}")
            error.__cause__ = exc
            try:
                self._on_error(error)
            except Exception:
                logger.exception("Error sink failed", extra={"context": {"command_id": command.id}})

        handle = dispatch_action(command.action, on_error=report)

        if self._on_command_execute is not None:
            try:
                self._on_command_execute(command)
            except Exception:
                logger.exception(
                    "on_command_execute callback failed",
                    extra={"context": {"command_id": command.id}},
                )
        return handle

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_key(self, press: KeyPress) -> bool:
        """Apply a key press.

        The open/toggle shortcut works in either state; navigation keys,
        Enter and Escape only while open.

        Returns:
            True if the key was consumed
        """
        if any(s.matches(press) for s in self._shortcuts):
            self.toggle()
            return True

        if not self._state.is_open:
            return False

        if press.key == ESCAPE:
            self.close()
            return True
        if press.key == ARROW_DOWN or (press.key == TAB and not press.shift):
            self.select_next()
            return True
        if press.key == ARROW_UP or (press.key == TAB and press.shift):
            self.select_previous()
            return True
        if press.key == ENTER:
            self.confirm()
            return True
        return False


def create_palette(
    config: Optional[PaletteConfig] = None,
    commands: Iterable[Command] = (),
    **callbacks: Any,
) -> PaletteController:
    """Wire registry, file-backed recency cache and controller from config.

    Args:
        config: Palette configuration (default: get_config())
        commands: Initial commands
        **callbacks: on_command_execute, on_calculation_accept, on_error

    Returns:
        Ready controller, closed
    """
    config = config or get_config()
    registry = CommandRegistry(commands)
    recency = RecencyCache(JsonFileRecentStore(config.recent_path), max_items=config.max_recent)
    alt = Shortcut.parse(config.alt_shortcut) if config.alt_shortcut else None
    controller = PaletteController(
        registry,
        recency,
        shortcut=Shortcut.parse(config.shortcut),
        alt_shortcut=alt,
        **callbacks,
    )
    logger.info(
        "Command palette ready",
        extra={"context": {"commands": len(registry), "recent": len(recency)}},
    )
    return controller
