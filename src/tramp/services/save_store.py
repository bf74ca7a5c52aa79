"""Key-value persistence backends for the single save document."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Protocol

from tramp import config

SAVE_KEY = "tramp_freighter_save"


class SaveStore(Protocol):
    def exists(self) -> bool: ...

    def read(self) -> Dict[str, Any] | None: ...

    def write(self, payload: Dict[str, Any]) -> None: ...

    def delete(self) -> None: ...


class JsonFileSaveStore:
    """Stores the save document as one JSON file named after the key."""

    def __init__(self, base_dir: Path | str | None = None, key: str = SAVE_KEY) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_save_dir()
        self._key = key

    @property
    def path(self) -> Path:
        return self._base_dir / f"{self._key}.json"

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Dict[str, Any] | None:
        """Return the parsed document, or None when nothing is stored.

        Raises ``json.JSONDecodeError`` when the file is not valid JSON.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(text)

    def write(self, payload: Dict[str, Any]) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return


class InMemorySaveStore:
    """Holds the serialized text in memory; used by tests and headless runs."""

    def __init__(self, key: str = SAVE_KEY) -> None:
        self._key = key
        self._values: Dict[str, str] = {}
        self.write_count = 0

    def exists(self) -> bool:
        return self._key in self._values

    def read(self) -> Dict[str, Any] | None:
        text = self._values.get(self._key)
        if text is None:
            return None
        return json.loads(text)

    def write(self, payload: Dict[str, Any]) -> None:
        self._values[self._key] = json.dumps(payload, sort_keys=True)
        self.write_count += 1

    def write_raw(self, text: str) -> None:
        """Store text verbatim, bypassing serialization."""
        self._values[self._key] = text

    def delete(self) -> None:
        self._values.pop(self._key, None)
