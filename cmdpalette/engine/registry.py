"""Command registry - identifier-keyed store of commands.

Registration is insert-or-replace by id (last write wins), so modules
can register at any time without coordinating. Iteration follows first
registration order; replacing a command keeps its slot.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from cmdpalette.core.exceptions import ValidationError
from cmdpalette.core.logging import get_logger
from cmdpalette.engine.models import Command

logger = get_logger(__name__)


class CommandRegistry:
    """Commands keyed by id.

    Every mutation completes before it returns and bumps revision, which
    readers use to detect a stale snapshot.
    """

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._commands: dict[str, Command] = {}
        self._revision = 0
        self.merge_all(commands)

    @property
    def revision(self) -> int:
        """Counter bumped on every effective mutation."""
        return self._revision

    def register(self, command: Command) -> None:
        """Insert a command, replacing any command with the same id."""
        if not command.id:
            raise ValidationError("Command id must not be empty")
        replaced = command.id in self._commands
        self._commands[command.id] = command
        self._revision += 1
        logger.debug(
            "Command registered",
            extra={"context": {"command_id": command.id, "replaced": replaced}},
        )

    def unregister(self, command_id: str) -> bool:
        """Remove a command by id. Unknown ids are ignored.

        Returns:
            True if a command was removed
        """
        if self._commands.pop(command_id, None) is None:
            return False
        self._revision += 1
        logger.debug("Command unregistered", extra={"context": {"command_id": command_id}})
        return True

    def merge_all(self, commands: Iterable[Command]) -> None:
        """Register each command, leaving every other entry untouched.

        The batch is validated first, so a bad descriptor leaves the
        registry unchanged.
        """
        batch = list(commands)
        if not batch:
            return
        for command in batch:
            if not command.id:
                raise ValidationError("Command id must not be empty")
        for command in batch:
            self._commands[command.id] = command
        self._revision += 1
        logger.debug("Commands merged", extra={"context": {"count": len(batch)}})

    def clear(self) -> None:
        """Remove all commands."""
        if not self._commands:
            return
        self._commands.clear()
        self._revision += 1

    def get(self, command_id: str) -> Optional[Command]:
        return self._commands.get(command_id)

    def snapshot(self) -> tuple[Command, ...]:
        """Immutable view of the current commands in registry order."""
        return tuple(self._commands.values())

    @contextmanager
    def scoped(self, commands: Iterable[Command]) -> Iterator["CommandRegistry"]:
        """Register commands for the duration of a with-block.

        On exit exactly those ids are unregistered, whatever replaced
        them in the meantime.
        """
        batch = list(commands)
        self.merge_all(batch)
        try:
            yield self
        finally:
            for command in batch:
                self.unregister(command.id)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.snapshot())
