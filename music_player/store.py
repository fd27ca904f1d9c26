"""JSON key-value storage in the per-user config directory.

Every ``set`` writes the whole document straight back to disk. Reads are
served from memory after the first load.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

from .errors import PersistenceIOFailure
from .logging_config import get_logger

logger = get_logger(__name__)

STATE_FILENAME = "state.json"


def _config_dir() -> Path:
    override = os.getenv("MUSIC_PLAYER_CONFIG_DIR")
    if override:
        base = Path(os.path.expanduser(override))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support" / "MusicPlayer"
    elif os.name == "nt":
        base = Path(os.path.expanduser(os.getenv("APPDATA", "~"))) / "MusicPlayer"
    else:
        base = Path.home() / ".config" / "music-player"
    base.mkdir(parents=True, exist_ok=True)
    return base


class KeyValueStore:
    """A small JSON document of named keys, written through on every change."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else _config_dir() / STATE_FILENAME
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8")) if self.path.exists() else {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            raw = {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring state file %s: top level is not an object", self.path)
            raw = {}
        self._data = raw
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and flush to disk.

        The in-memory value is updated even when the write fails.

        Raises:
            PersistenceIOFailure: If the file could not be written.
        """
        self._load()[key] = value
        self.save()

    def keys(self) -> list[str]:
        return list(self._load().keys())

    def save(self) -> None:
        data = self._load()
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.path, e)
            raise PersistenceIOFailure(str(e)) from e
