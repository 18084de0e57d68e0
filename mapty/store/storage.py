"""Durable key-value storage backends.

The repository depends on the KeyValueStorage protocol only.  Values are
opaque strings; the storage never interprets them.

    - InMemoryStorage: a dict, for tests and throwaway sessions.
    - FileStorage: one file per key inside a directory, written atomically
      so a crash mid-write never leaves a half-written snapshot behind.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")


class KeyValueStorage(Protocol):
    """Protocol for a string-to-string durable slot store."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or None if absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete *key*.  Removing an absent key is not an error."""
        ...


class InMemoryStorage:
    """Process-local storage backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class FileStorage:
    """Directory-backed storage: key ``workouts`` lives in ``<root>/workouts.json``.

    Args:
        root: Directory holding the files.  Created on first write.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)
        logger.debug("Wrote %d chars to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        path.unlink(missing_ok=True)
        logger.debug("Removed %s", path)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"
