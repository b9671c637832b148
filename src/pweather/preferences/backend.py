"""Key/value backends for persisted preferences."""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..exceptions import PreferenceStoreError


class KeyValueBackend(ABC):
    """Durable string-keyed storage for JSON-compatible values."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key if present."""


class MemoryBackend(KeyValueBackend):
    """Process-local backend, used by tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileBackend(KeyValueBackend):
    """Single JSON document on disk, rewritten atomically on every change."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data = self._load()

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise PreferenceStoreError(
                f"Failed reading preferences file {self.path}: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise PreferenceStoreError(
                f"Preferences file {self.path} must contain a JSON object, "
                f"got {type(data).__name__}."
            )
        return data

    def _flush(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
                fh.write("\n")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PreferenceStoreError(f"Failed writing preferences file: {exc}") from exc
