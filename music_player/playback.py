"""Playback engine: the queue's transport state machine.

States are EMPTY, PAUSED and PLAYING. Replacing the queue always lands in
PAUSED at index 0 (or EMPTY for an empty queue); play/pause move between
PAUSED and PLAYING; an audio error on the active track forces PAUSED.

``is_playing`` reflects the *requested* state as soon as ``play()`` returns.
The audio output reports failures asynchronously; those reports carry the
load generation they belong to and are ignored once a newer load has been
issued.
"""

from __future__ import annotations

import random
from typing import Iterable, Optional

from PySide6.QtCore import QObject, Signal

from .audio_output import AudioOutput
from .config import DEFAULT_VOLUME
from .errors import EmptyQueue, MusicPlayerError, OutOfRange, PlaybackFailed
from .logging_config import get_logger
from .models import PlaybackState, PlayerState, Track
from .track_store import TrackStore

logger = get_logger(__name__)


class PlaybackEngine(QObject):
    """Owns the queue, the current index and the play/shuffle/repeat flags.

    Signals:
        stateChanged(bool): ``is_playing`` changed.
        currentIndexChanged(int): The current queue index changed.
        modesChanged(bool, bool): Shuffle / repeat flags changed.
        queueReplaced(int): A new queue of N tracks was installed.
        emptyQueue(): An operation needed tracks but the queue is empty.
        playbackFailed(str, str): Path and reason of a failed playback.
        durationChanged(float): Duration of the loaded track in seconds.
        positionChanged(float): Playback position in seconds.
        notice(str, str): Level (info/success/warning/error) and message
            meant for the user.

    Args:
        output: Audio output collaborator. The engine is its only caller and
            its only subscriber.
        rng: Random source for shuffle; defaults to a fresh ``random.Random``.
        volume: Initial volume percent.
    """

    stateChanged = Signal(bool)
    currentIndexChanged = Signal(int)
    modesChanged = Signal(bool, bool)
    queueReplaced = Signal(int)
    emptyQueue = Signal()
    playbackFailed = Signal(str, str)
    durationChanged = Signal(float)
    positionChanged = Signal(float)
    notice = Signal(str, str)

    def __init__(self, output: AudioOutput, rng: Optional[random.Random] = None,
                 volume: int = DEFAULT_VOLUME, parent=None):
        super().__init__(parent)
        self._output = output
        self._rng = rng or random.Random()
        self._store = TrackStore()
        self._state = PlaybackState()

        # Generation of the active load; events from any other are stale.
        self._generation: Optional[int] = None
        self._loaded_path: Optional[str] = None
        self._duration: Optional[float] = None
        self._position = 0.0
        self._volume = 0.0
        self._last_error: Optional[MusicPlayerError] = None

        output.on("loaded", self._on_loaded)
        output.on("time_update", self._on_time_update)
        output.on("ended", self._on_ended)
        output.on("error", self._on_error)

        self.set_volume(volume)

    # --- read-only state ----------------------------------------------------

    @property
    def store(self) -> TrackStore:
        return self._store

    @property
    def state(self) -> PlaybackState:
        """A copy of the current transport state."""
        s = self._state
        return PlaybackState(s.current_index, s.is_playing, s.is_shuffled, s.is_repeated)

    @property
    def player_state(self) -> PlayerState:
        if self._store.is_empty:
            return PlayerState.EMPTY
        return PlayerState.PLAYING if self._state.is_playing else PlayerState.PAUSED

    @property
    def last_error(self) -> Optional[MusicPlayerError]:
        """``EmptyQueue`` or ``PlaybackFailed`` from the last failed play, if any."""
        return self._last_error

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_track(self) -> Optional[Track]:
        if self._store.is_empty:
            return None
        return self._store.get(self._state.current_index)

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def is_shuffled(self) -> bool:
        return self._state.is_shuffled

    @property
    def is_repeated(self) -> bool:
        return self._state.is_repeated

    @property
    def volume(self) -> float:
        """Volume as a 0.0-1.0 fraction."""
        return self._volume

    @property
    def duration_seconds(self) -> Optional[float]:
        return self._duration

    @property
    def position_seconds(self) -> float:
        return self._position

    @property
    def progress(self) -> float:
        if not self._duration:
            return 0.0
        return max(0.0, min(1.0, self._position / self._duration))

    # --- queue --------------------------------------------------------------

    def replace_queue(self, tracks: Iterable[Track]) -> int:
        """Install a new queue and reset to index 0, paused.

        The first track is loaded (not played) so its duration becomes known.

        Returns:
            Number of tracks in the new queue.
        """
        if self._state.is_playing:
            self._output.pause()
        self._store.replace(tracks)
        self._state.current_index = 0
        self._state.is_playing = False
        self._generation = None
        self._loaded_path = None
        self._set_duration(None)
        self._set_position(0.0)

        if not self._store.is_empty:
            self._load_current()

        count = len(self._store)
        logger.info("Queue replaced with %d track(s)", count)
        self.queueReplaced.emit(count)
        self.currentIndexChanged.emit(0)
        self.stateChanged.emit(False)
        return count

    # --- transport ----------------------------------------------------------

    def play(self) -> bool:
        """Start (or resume) the current track.

        Returns:
            False if the queue is empty or the output refused the request.
        """
        if self._store.is_empty:
            self._report_empty("play")
            return False

        track = self._store.get(self._state.current_index)
        try:
            if self._loaded_path != track.path:
                self._load_current()
            self._output.play()
        except Exception as e:
            logger.exception("Audio output rejected %s", track.path)
            self._fail(track.path, str(e))
            return False

        self._last_error = None
        self._set_playing(True)
        self.notice.emit("info", f"Now Playing: {track.name}")
        return True

    def pause(self) -> None:
        if not self._state.is_playing:
            return
        self._output.pause()
        self._set_playing(False)

    def stop(self) -> None:
        """Pause and rewind the current track to its start."""
        if self._store.is_empty:
            return
        self._output.pause()
        if self._loaded_path is not None:
            self._output.seek(0.0)
        self._set_position(0.0)
        self._set_playing(False)

    def toggle(self) -> bool:
        """Pause if playing, otherwise play. Returns the new ``is_playing``."""
        if self._state.is_playing:
            self.pause()
        else:
            self.play()
        return self._state.is_playing

    def select_track(self, index: int) -> bool:
        """Jump to *index* and play it from the start.

        Raises:
            OutOfRange: If index is not in ``[0, len(queue))``; the queue and
                the transport state are left untouched.
        """
        if not 0 <= index < len(self._store):
            raise OutOfRange(index, len(self._store))
        return self._jump(index)

    def previous(self) -> bool:
        """Step back one track, wrapping to the end. Shuffle is ignored."""
        n = len(self._store)
        if n == 0:
            return False
        return self._jump((self._state.current_index - 1 + n) % n)

    def next(self) -> bool:
        """Advance one track, or to a uniformly random track when shuffled.

        A shuffled advance may pick the current track again.
        """
        n = len(self._store)
        if n == 0:
            return False
        if self._state.is_shuffled:
            index = self._rng.randint(0, n - 1)
        else:
            index = (self._state.current_index + 1) % n
        return self._jump(index)

    def on_track_ended(self) -> bool:
        """Handle end of track: repeat the same track, otherwise ``next()``.

        Repeat is repeat-one and takes precedence over shuffle.
        """
        if self._store.is_empty:
            return False
        if self._state.is_repeated:
            self._output.seek(0.0)
            self._set_position(0.0)
            return self.play()
        return self.next()

    def seek(self, fraction: float) -> bool:
        """Seek to *fraction* (0.0-1.0) of the track's duration.

        Does nothing and returns False while the duration is unknown.
        """
        if self._store.is_empty or self._duration is None:
            return False
        fraction = max(0.0, min(1.0, float(fraction)))
        self._output.seek(fraction)
        self._set_position(fraction * self._duration)
        return True

    def set_volume(self, percent: float) -> float:
        """Set volume from a 0-100 percentage; out-of-range input is clamped.

        Returns:
            The stored 0.0-1.0 volume.
        """
        percent = max(0.0, min(100.0, float(percent)))
        self._volume = percent / 100.0
        self._output.set_volume(self._volume)
        return self._volume

    # --- modes --------------------------------------------------------------

    def toggle_shuffle(self) -> bool:
        self._state.is_shuffled = not self._state.is_shuffled
        self.modesChanged.emit(self._state.is_shuffled, self._state.is_repeated)
        self.notice.emit("info", f"Shuffle {'ON' if self._state.is_shuffled else 'OFF'}")
        return self._state.is_shuffled

    def toggle_repeat(self) -> bool:
        self._state.is_repeated = not self._state.is_repeated
        self.modesChanged.emit(self._state.is_shuffled, self._state.is_repeated)
        self.notice.emit("info", f"Repeat {'ON' if self._state.is_repeated else 'OFF'}")
        return self._state.is_repeated

    # --- internals ----------------------------------------------------------

    def _jump(self, index: int) -> bool:
        if index != self._state.current_index:
            self._state.current_index = index
            self.currentIndexChanged.emit(index)
        # Always reload so the track starts from the beginning.
        self._loaded_path = None
        return self.play()

    def _load_current(self) -> None:
        track = self._store.get(self._state.current_index)
        self._loaded_path = track.path
        self._set_duration(None)
        self._set_position(0.0)
        self._generation = self._output.load(track.path)
        logger.debug("Loaded %s (generation %d)", track.path, self._generation)

    def _report_empty(self, operation: str) -> None:
        self._last_error = EmptyQueue(operation)
        logger.info("%s", self._last_error)
        self.emptyQueue.emit()
        self.notice.emit("warning", "Please select music files first")

    def _fail(self, path: str, reason: str) -> None:
        # Force a reload next time so the user can retry the same track.
        self._loaded_path = None
        self._generation = None
        error = PlaybackFailed(path, reason)
        self._last_error = error
        logger.error("%s", error)
        self._set_playing(False)
        self.playbackFailed.emit(error.path, error.reason)
        self.notice.emit("error", "Error playing audio file")

    def _set_playing(self, playing: bool) -> None:
        if self._state.is_playing != playing:
            self._state.is_playing = playing
            self.stateChanged.emit(playing)

    def _set_duration(self, duration: Optional[float]) -> None:
        self._duration = duration
        self.durationChanged.emit(duration or 0.0)

    def _set_position(self, seconds: float) -> None:
        self._position = seconds
        self.positionChanged.emit(seconds)

    def _is_stale(self, generation: int, event: str) -> bool:
        if generation != self._generation:
            logger.debug("Ignoring stale %s event (generation %s, active %s)",
                         event, generation, self._generation)
            return True
        return False

    # --- audio output events ------------------------------------------------

    def _on_loaded(self, generation: int, duration_seconds: float):
        if self._is_stale(generation, "loaded"):
            return
        self._set_duration(duration_seconds if duration_seconds > 0 else None)

    def _on_time_update(self, generation: int, current_seconds: float):
        if self._is_stale(generation, "time_update"):
            return
        self._set_position(current_seconds)

    def _on_ended(self, generation: int):
        if self._is_stale(generation, "ended"):
            return
        self.on_track_ended()

    def _on_error(self, generation: int, reason: str):
        if self._is_stale(generation, "error"):
            return
        self._fail(self._loaded_path or "", reason)
