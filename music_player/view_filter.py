"""Projection of the queue into what the playlist panel shows.

Nothing here mutates the queue or the favorites; the functions only read.
Displayed rows map back to queue positions by path, never by row number,
because the two diverge as soon as the favorites filter is active.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional, Union

from .models import Track, ViewMode
from .track_store import TrackStore


def visible(store: Iterable[Track], favorites: AbstractSet[str], mode: ViewMode) -> List[Track]:
    """Return the tracks to display for *mode*, in queue order."""
    if mode is ViewMode.FAVORITES_ONLY:
        return [t for t in store if t.path in favorites]
    return list(store)


def queue_index_for(store: TrackStore, item: Union[Track, str]) -> Optional[int]:
    """Return the true queue index of a displayed track (or path), or None."""
    path = item.path if isinstance(item, Track) else item
    return store.index_of(path)


def empty_message(mode: ViewMode) -> tuple[str, str]:
    """Headline and hint shown when the current view has no rows."""
    if mode is ViewMode.FAVORITES_ONLY:
        return "No favorite songs", "Add songs to favorites"
    return "No music selected", 'Click "Add Music" to get started'
