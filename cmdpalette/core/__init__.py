"""Core package - Configuration, logging, exceptions.

This package provides foundational infrastructure used by all other layers.

Modules:
    - config: Environment and configuration management
    - logging: Structured JSON logging
    - exceptions: Custom exception hierarchy
    - tasks: Background and asynchronous action dispatch
"""

from cmdpalette.core.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    ExpressionError,
    PaletteError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "PaletteError",
    "ConfigurationError",
    "ValidationError",
    "ExpressionError",
    "PersistenceError",
    "CommandExecutionError",
]
