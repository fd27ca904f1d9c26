"""Data model: tracks, playback state and view modes."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


# Allow-listed audio extensions (lower case, no dot)
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "m4a", "flac", "aac"})


def is_audio_file(path: str) -> bool:
    """Return True if *path* has an allow-listed extension (any case)."""
    ext = os.path.splitext(path)[1]
    return ext[1:].lower() in AUDIO_EXTENSIONS


@dataclass(frozen=True)
class Track:
    """One audio file on disk.

    Identity is the absolute ``path``; two tracks with the same path compare
    equal even if their metadata was read at different times.

    Attributes:
        path: Absolute filesystem path.
        name: Display name (the file's base name).
        size_bytes: File size in bytes.
        modified_at: Last modification time.
    """

    path: str
    name: str = field(compare=False)
    size_bytes: int = field(default=0, compare=False)
    modified_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        if self.size_bytes < 0:
            raise ValueError(f"size_bytes must be >= 0, got {self.size_bytes}")

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "Track":
        return cls(
            path=path,
            name=os.path.basename(path),
            size_bytes=int(st.st_size),
            modified_at=datetime.fromtimestamp(st.st_mtime),
        )

    @property
    def size_label(self) -> str:
        return format_file_size(self.size_bytes)


class ViewMode(Enum):
    """Which projection of the queue is rendered."""
    ALL_SONGS = "all_songs"
    FAVORITES_ONLY = "favorites_only"


class PlayerState(Enum):
    EMPTY = "empty"
    PAUSED = "paused"
    PLAYING = "playing"


@dataclass
class PlaybackState:
    """Mutable transport state owned by the playback engine."""
    current_index: int = 0
    is_playing: bool = False
    is_shuffled: bool = False
    is_repeated: bool = False


_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size_bytes: int) -> str:
    """Human readable size: ``0 Bytes``, ``512 Bytes``, ``1.5 KB``, ``3.21 MB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    value = float(size_bytes)
    i = 0
    while value >= 1024 and i < len(_SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[i]}"


def format_time(seconds: Optional[float]) -> str:
    """Format seconds as ``m:ss``; unknown values render as ``0:00``."""
    if seconds is None or math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return "0:00"
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"
