"""Recency cache - most-recent-first list of executed command ids.

The list is bounded and deduplicated. It is loaded once from an injected
store and written back after every change. Store failures never reach
the caller: the cache just keeps working in memory for the session.
"""

import json
from pathlib import Path
from typing import Any, Optional, Protocol

from cmdpalette.core.exceptions import PersistenceError
from cmdpalette.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_RECENT = 10


class RecentStore(Protocol):
    """Persistence boundary for recent command ids."""

    def load(self) -> list[str]: ...

    def save(self, ids: list[str]) -> None: ...


class MemoryRecentStore:
    """Process-local store, mainly for tests and headless use."""

    def __init__(self, ids: Optional[list[str]] = None) -> None:
        self.ids: list[str] = list(ids or [])

    def load(self) -> list[str]:
        return list(self.ids)

    def save(self, ids: list[str]) -> None:
        self.ids = list(ids)


class JsonFileRecentStore:
    """Stores the id list as a JSON array in a file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[str]:
        """Read ids from disk. A missing file is an empty list.

        Raises:
            PersistenceError: If the file cannot be read or is not a JSON array
        """
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read {self._path}: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(f"{self._path} does not hold a JSON array")
        return data

    def save(self, ids: list[str]) -> None:
        """Write ids to disk.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(ids), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Cannot write {self._path}: {e}") from e


def _sanitize(raw: Any, limit: int) -> list[str]:
    """Keep string ids, first occurrence only, capped at limit."""
    ids: list[str] = []
    if not isinstance(raw, (list, tuple)):
        return ids
    for item in raw:
        if isinstance(item, str) and item and item not in ids:
            ids.append(item)
        if len(ids) >= limit:
            break
    return ids


class RecencyCache:
    """Bounded, deduplicated, most-recent-first command ids."""

    def __init__(self, store: Optional[RecentStore] = None, max_items: int = DEFAULT_MAX_RECENT):
        """Initialize and load from store.

        Args:
            store: Persistence backend; None keeps the list in memory only
            max_items: Maximum ids kept, applied on load and on every change
        """
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self._store = store
        self._max_items = max_items
        self._ids: list[str] = []
        self._persist = store is not None
        self._load()

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def persistent(self) -> bool:
        """False once the store has failed this session."""
        return self._persist

    def ids(self) -> list[str]:
        """Recent ids, most recent first."""
        return list(self._ids)

    def record_execution(self, command_id: str) -> None:
        """Move command_id to the front, dropping the oldest past the cap."""
        ids = [i for i in self._ids if i != command_id]
        ids.insert(0, command_id)
        self._ids = ids[: self._max_items]
        logger.debug(
            "Recent command recorded",
            extra={"context": {"command_id": command_id, "count": len(self._ids)}},
        )
        self._save()

    def remove(self, command_id: str) -> bool:
        """Forget one id. Returns True if it was present."""
        if command_id not in self._ids:
            return False
        self._ids = [i for i in self._ids if i != command_id]
        self._save()
        return True

    def clear(self) -> None:
        self._ids = []
        self._save()

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._ids

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if self._store is None:
            return
        try:
            raw = self._store.load()
        except Exception:
            logger.warning("Failed to load recent commands", exc_info=True)
            self._persist = False
            return
        self._ids = _sanitize(raw, self._max_items)
        logger.debug("Recent commands loaded", extra={"context": {"count": len(self._ids)}})

    def _save(self) -> None:
        if self._store is None or not self._persist:
            return
        try:
            self._store.save(list(self._ids))
        except Exception:
            logger.warning("Failed to save recent commands", exc_info=True)
            self._persist = False
