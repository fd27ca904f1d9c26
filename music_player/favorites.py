"""Favorite tracks, persisted write-through to the key-value store.

Favorites are stored as a JSON array of absolute paths under the single key
``favorites``. The format carries no version field.

A failed save is reported but never rolls back the in-memory set: for the
rest of the session the set stays correct even though it may be lost if the
process dies before the next successful save.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Set

from PySide6.QtCore import QObject, Signal

from .errors import PersistenceIOFailure
from .logging_config import get_logger
from .store import KeyValueStore

logger = get_logger(__name__)

FAVORITES_KEY = "favorites"


class FavoritesRepository:
    """Loads and saves the favorites set."""

    def __init__(self, store: KeyValueStore, key: str = FAVORITES_KEY):
        self.store = store
        self.key = key

    def load(self) -> Set[str]:
        raw = self.store.get(self.key, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed %r entry: expected a list", self.key)
            return set()
        return {p for p in raw if isinstance(p, str)}

    def save(self, paths: Iterable[str]) -> bool:
        """Persist *paths*. Returns False (and logs) if the write failed."""
        try:
            self.store.set(self.key, sorted(paths))
        except PersistenceIOFailure as e:
            logger.error("Favorites not saved: %s", e.reason)
            return False
        return True


class Favorites(QObject):
    """In-memory favorites set that saves after every change.

    Paths may refer to tracks that are not in the current queue; they are
    kept and simply show nothing in the favorites view.

    Signals:
        changed(str, bool): Path and its new membership.
        persistenceFailed(str): Reason a save failed.
    """

    changed = Signal(str, bool)
    persistenceFailed = Signal(str)

    def __init__(self, repository: FavoritesRepository, parent=None):
        super().__init__(parent)
        self._repository = repository
        self._paths: Set[str] = repository.load()
        self.last_save_ok = True
        logger.info("Loaded %d favorite(s)", len(self._paths))

    @property
    def paths(self) -> frozenset:
        return frozenset(self._paths)

    def contains(self, path: str) -> bool:
        return path in self._paths

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def toggle(self, path: str) -> bool:
        """Flip membership of *path*; returns True if it is now a favorite."""
        if path in self._paths:
            self.remove(path)
            return False
        self.add(path)
        return True

    def add(self, path: str) -> None:
        if path in self._paths:
            return
        self._paths.add(path)
        self._flush()
        self.changed.emit(path, True)

    def remove(self, path: str) -> None:
        if path not in self._paths:
            return
        self._paths.discard(path)
        self._flush()
        self.changed.emit(path, False)

    def _flush(self) -> bool:
        self.last_save_ok = self._repository.save(self._paths)
        if not self.last_save_ok:
            self.persistenceFailed.emit("Could not save favorites")
        return self.last_save_ok
