"""Desktop music player: play queue, transport controls and favorites."""

from .errors import (
    EmptyQueue,
    MusicPlayerError,
    OutOfRange,
    PersistenceIOFailure,
    PlaybackFailed,
    ScanIOError,
)
from .models import AUDIO_EXTENSIONS, PlaybackState, PlayerState, Track, ViewMode

__version__ = "1.0.0"

__all__ = [
    "AUDIO_EXTENSIONS",
    "EmptyQueue",
    "MusicPlayerError",
    "OutOfRange",
    "PersistenceIOFailure",
    "PlaybackFailed",
    "PlaybackState",
    "PlayerState",
    "ScanIOError",
    "Track",
    "ViewMode",
]
