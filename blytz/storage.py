"""Client-held state storage.

Plays the role of per-browser local storage: auth tokens and the persisted
cart live here under string keys. Stores are injected into the components
that need them instead of being reached through module globals.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .console import warn


class StateStorage(ABC):
    """Persistence adapter interface."""

    @abstractmethod
    def load(self, key: str) -> Any:
        """Return the stored value or ``None`` when the key is absent."""

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""


class MemoryStorage(StateStorage):
    """Process-local storage, nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def load(self, key: str) -> Any:
        return self._data.get(key)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(StateStorage):
    """All keys in a single JSON object on disk, rewritten on every change.

    Writes go through a sibling temp file that replaces the original. An
    unreadable file is treated as empty and overwritten by the next save.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            text = handle.read()
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError as exc:
            warn(f"Ignoring unreadable state file {self.path}", exc)
            return {}
        if not isinstance(data, dict):
            warn(f"Ignoring state file {self.path}: expected a JSON object")
            return {}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
        tmp_path.replace(self.path)

    def load(self, key: str) -> Any:
        return self._read().get(key)

    def save(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
