"""Configuration management for cmdpalette.

Loads configuration from environment variables and .env file.
Provides validation and sensible defaults.

Usage:
    from cmdpalette.core.config import get_config, validate_config

    config = get_config()
    issues = validate_config(config)
    if issues:
        for issue in issues:
            print(f"Config issue: {issue}")
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cmdpalette.core.exceptions import ConfigurationError
from cmdpalette.core.logging import get_logger

logger = get_logger(__name__)

# Default paths (defined once, used by both PaletteConfig and load_config)
DEFAULT_RECENT_PATH = Path.home() / ".cmdpalette" / "recent.json"
DEFAULT_LOG_PATH = Path.home() / ".cmdpalette" / "logs"
DEFAULT_MAX_RECENT = 10
DEFAULT_SHORTCUT = "meta+k"
DEFAULT_ALT_SHORTCUT = "meta+space"


@dataclass
class PaletteConfig:
    """Palette configuration.

    Attributes:
        recent_path: JSON file holding recently executed command ids
        log_path: Directory for log files
        max_recent: Maximum number of recent command ids kept
        shortcut: Primary open/toggle chord, e.g. "meta+k"
        alt_shortcut: Secondary open/toggle chord, None to disable
        debug: Enable debug logging
    """

    recent_path: Path = field(default_factory=lambda: DEFAULT_RECENT_PATH)
    log_path: Path = field(default_factory=lambda: DEFAULT_LOG_PATH)
    max_recent: int = DEFAULT_MAX_RECENT
    shortcut: str = DEFAULT_SHORTCUT
    alt_shortcut: Optional[str] = DEFAULT_ALT_SHORTCUT
    debug: bool = False


def load_env_file(path: Path) -> dict[str, str]:
    """Read KEY=VALUE pairs from a .env file.

    Blank lines and # comments are skipped, an optional leading "export"
    is dropped, and matching single or double quotes around a value are
    removed. A missing file yields an empty dict.
    """
    pairs: dict[str, str] = {}
    if not path.is_file():
        return pairs

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        key, _, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if key:
            pairs[key] = value
    return pairs


def _lookup(key: str, env_vars: dict[str, str]) -> Optional[str]:
    """Environment first, then .env file. Empty strings are kept."""
    if key in os.environ:
        return os.environ[key]
    return env_vars.get(key)


def _get_path(key: str, default: Path, env_vars: dict[str, str]) -> Path:
    """Get path from environment, expanding ~ and resolving."""
    value = _lookup(key, env_vars)
    if value:
        return Path(value).expanduser().resolve()
    return default


def _get_str(key: str, default: Optional[str], env_vars: dict[str, str]) -> Optional[str]:
    """Get string from environment. An explicit empty value means None."""
    value = _lookup(key, env_vars)
    if value is None:
        return default
    return value.strip() or None


def _get_int(key: str, default: int, env_vars: dict[str, str]) -> int:
    """Get integer from environment."""
    value = _lookup(key, env_vars)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def _get_bool(key: str, default: bool, env_vars: dict[str, str]) -> bool:
    """Get boolean from environment."""
    value = _lookup(key, env_vars)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def load_config(env_file: Optional[Path] = None) -> PaletteConfig:
    """Load configuration from environment and .env file.

    Priority:
        1. Environment variables (highest)
        2. .env file
        3. Default values (lowest)

    Args:
        env_file: Path to .env file. Defaults to .env in current directory.

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If a numeric setting is not a number
    """
    if env_file is None:
        env_file = Path.cwd() / ".env"

    env_vars = load_env_file(Path(env_file))

    return PaletteConfig(
        recent_path=_get_path("CMDPALETTE_RECENT_PATH", DEFAULT_RECENT_PATH, env_vars),
        log_path=_get_path("CMDPALETTE_LOG_PATH", DEFAULT_LOG_PATH, env_vars),
        max_recent=_get_int("CMDPALETTE_MAX_RECENT", DEFAULT_MAX_RECENT, env_vars),
        shortcut=_get_str("CMDPALETTE_SHORTCUT", DEFAULT_SHORTCUT, env_vars) or DEFAULT_SHORTCUT,
        alt_shortcut=_get_str("CMDPALETTE_ALT_SHORTCUT", DEFAULT_ALT_SHORTCUT, env_vars),
        debug=_get_bool("CMDPALETTE_DEBUG", False, env_vars),
    )


def validate_config(config: PaletteConfig) -> list[str]:
    """Validate configuration.

    Checks:
        - max_recent is positive
        - Shortcut chords parse
        - Recent-store and log directories exist or can be created

    Args:
        config: Configuration to validate

    Returns:
        List of issues (empty if valid)
    """
    from cmdpalette.gui.keys import Shortcut

    issues: list[str] = []

    if config.max_recent < 1:
        issues.append(f"max_recent must be at least 1, got {config.max_recent}")

    for label, chord in (("shortcut", config.shortcut), ("alt_shortcut", config.alt_shortcut)):
        if chord is None:
            continue
        try:
            Shortcut.parse(chord)
        except ConfigurationError as e:
            issues.append(f"Invalid {label}: {e}")

    recent_dir = config.recent_path.parent
    try:
        recent_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(recent_dir, os.W_OK):
            issues.append(f"Recent-command directory not writable: {recent_dir}")
    except OSError as e:
        issues.append(f"Cannot create recent-command directory {recent_dir}: {e}")

    try:
        config.log_path.mkdir(parents=True, exist_ok=True)
        if not os.access(config.log_path, os.W_OK):
            issues.append(f"Log directory not writable: {config.log_path}")
    except OSError as e:
        issues.append(f"Cannot create log directory {config.log_path}: {e}")

    return issues


# Singleton config
_config: Optional[PaletteConfig] = None


def get_config() -> PaletteConfig:
    """Return cached configuration singleton.

    Loads configuration on first call, returns cached version thereafter.

    Returns:
        Palette configuration
    """
    global _config
    if _config is None:
        _config = load_config()
        logger.debug(
            "Configuration loaded",
            extra={"context": {"recent_path": str(_config.recent_path)}},
        )
    return _config


def reset_config() -> None:
    """Reset cached configuration.

    Used primarily for testing.
    """
    global _config
    _config = None
