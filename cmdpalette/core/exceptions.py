"""cmdpalette exception hierarchy.

All custom exceptions inherit from PaletteError. Nothing in the palette
is fatal to the host: most of these are caught at a boundary and turned
into a degraded result or a log line.

Exception Hierarchy:
    PaletteError (base)
    ├── ConfigurationError
    ├── ValidationError
    ├── ExpressionError
    ├── PersistenceError
    └── CommandExecutionError
"""

from typing import Optional


class PaletteError(Exception):
    """Base exception for all palette errors."""

    pass


class ConfigurationError(PaletteError):
    """Configuration is invalid.

    Raised when:
        - An environment variable holds a value of the wrong type
        - A shortcut chord cannot be parsed
    """

    pass


class ValidationError(PaletteError):
    """Command descriptor validation failed.

    Raised when:
        - Required field (id, title) is missing or empty
        - Field value has the wrong shape
    """

    pass


class ExpressionError(PaletteError):
    """Arithmetic expression could not be evaluated.

    Raised inside the calculator when:
        - A character outside the whitelist is found
        - The token stream does not fit the grammar
        - An intermediate value is not finite (division by zero, overflow)

    Never escapes the calculator: callers see "no result".
    """

    pass


class PersistenceError(PaletteError):
    """Recent-command store read or write failed.

    Swallowed by the recency cache, which falls back to in-memory only.
    """

    pass


class CommandExecutionError(PaletteError):
    """A command action raised or its pending result failed.

    Wraps the original exception (available as __cause__) and is handed
    to the diagnostic sink, never raised to the host.
    """

    def __init__(self, command_id: str, message: Optional[str] = None):
        self.command_id = command_id
        super().__init__(message or f"Command {command_id!r} failed")
