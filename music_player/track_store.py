"""In-memory play queue."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Tuple

from .errors import OutOfRange
from .models import Track


class TrackStore:
    """Ordered collection of tracks with O(1) lookup by path.

    Order is insertion order (scan or selection order). If the same path is
    given twice only the first occurrence is kept, since a track's identity
    is its path.
    """

    def __init__(self, tracks: Iterable[Track] = ()):
        self._tracks: Tuple[Track, ...] = ()
        self._index: Dict[str, int] = {}
        self.replace(tracks)

    def replace(self, tracks: Iterable[Track]) -> None:
        unique = []
        index: Dict[str, int] = {}
        for track in tracks:
            if track.path in index:
                continue
            index[track.path] = len(unique)
            unique.append(track)
        self._tracks = tuple(unique)
        self._index = index

    def get(self, index: int) -> Track:
        """Return the track at *index*.

        Raises:
            OutOfRange: If index is not in ``[0, len)``. Negative indices are
                not wrapped.
        """
        if not 0 <= index < len(self._tracks):
            raise OutOfRange(index, len(self._tracks))
        return self._tracks[index]

    def index_of(self, path: str) -> Optional[int]:
        return self._index.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    @property
    def tracks(self) -> Tuple[Track, ...]:
        return self._tracks

    @property
    def is_empty(self) -> bool:
        return not self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __repr__(self):
        return f"<TrackStore ({len(self._tracks)} tracks)>"
