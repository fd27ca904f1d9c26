"""Error taxonomy for the music player.

Leaf I/O failures are caught where they happen and converted into one of
these kinds. Only ``OutOfRange`` is meant to escape to callers; the others
are recorded or reported as notices.
"""


class MusicPlayerError(Exception):
    """Base class for all music player errors."""


class EmptyQueue(MusicPlayerError):
    """A transport operation was attempted with no tracks loaded."""

    def __init__(self, operation: str = "play"):
        super().__init__(f"Cannot {operation}: the queue is empty")
        self.operation = operation


class OutOfRange(MusicPlayerError, IndexError):
    """An index outside ``[0, len(queue))`` was requested."""

    def __init__(self, index: int, length: int):
        super().__init__(f"Index {index} out of range for queue of {length} track(s)")
        self.index = index
        self.length = length


class PlaybackFailed(MusicPlayerError):
    """The audio output could not start or resume a track."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to play {path}: {reason}")
        self.path = path
        self.reason = reason


class ScanIOError(MusicPlayerError):
    """A file or directory could not be read during a scan."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class PersistenceIOFailure(MusicPlayerError):
    """Persisted state could not be written."""

    def __init__(self, reason: str):
        super().__init__(f"Could not save state: {reason}")
        self.reason = reason
